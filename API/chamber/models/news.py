from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from chamber.db.base_class import Base, utcnow

CATEGORIES = ("business", "policy", "event", "announcement")
DEFAULT_CATEGORY = "business"


class News(Base):
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String, default=DEFAULT_CATEGORY, nullable=False)
    author = Column(String, nullable=False)
    image_url = Column(String, default="")
    is_active = Column(Boolean, default=True, index=True)
    is_featured = Column(Boolean, default=False, index=True)
    published_at = Column(DateTime, default=utcnow, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
