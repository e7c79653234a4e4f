from .user import User
from .notice import Notice
from .news import News
from .gallery import GalleryImage
from .form_submission import FormSubmission
