from . import auth, notice, news, gallery, form
from .base import Message, to_event
from .auth import TokenClaims, UserPublic, UserProfile, AuthResponse, UserEnvelope
from .notice import Notice, NoticeCreate, NoticeUpdate, NoticeEnvelope, PdfFile
from .news import News, NewsCreate, NewsUpdate
from .gallery import GalleryImage, GalleryImageCreate, GalleryImageUpdate, GalleryImageEnvelope
from .form import FormSubmission, FormSubmissionCreate, FormSubmissionEnvelope
