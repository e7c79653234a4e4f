from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON
from chamber.db.base_class import Base, utcnow

PRIORITIES = ("high", "normal", "low")
DEFAULT_PRIORITY = "normal"


class Notice(Base):
    __tablename__ = "notices"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String, nullable=False)  # email of the admin who posted it
    priority = Column(String, default=DEFAULT_PRIORITY, nullable=False)
    pdf_file = Column(JSON, nullable=True)  # {filename, original_name, mimetype, size}
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
