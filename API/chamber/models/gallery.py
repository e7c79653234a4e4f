from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from chamber.db.base_class import Base, utcnow

CATEGORIES = ("meeting", "event", "conference")
DEFAULT_CATEGORY = "meeting"


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String, nullable=False)  # /api/files/<filename>
    alt_text = Column(String, nullable=False)
    category = Column(String, default=DEFAULT_CATEGORY, nullable=False)
    uploaded_by = Column(String, nullable=False)
    order = Column(Integer, default=0)  # manual sort key, ascending
    is_active = Column(Boolean, default=True, index=True)
    uploaded_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def filename(self) -> str:
        return self.image_url.rsplit("/", 1)[-1]
