# Import all models so Base.metadata knows every table before create_all
from chamber.db.base_class import Base  # noqa: F401
from chamber.models.user import User  # noqa: F401
from chamber.models.notice import Notice  # noqa: F401
from chamber.models.news import News  # noqa: F401
from chamber.models.gallery import GalleryImage  # noqa: F401
from chamber.models.form_submission import FormSubmission  # noqa: F401
