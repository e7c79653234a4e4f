from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from chamber.db.base_class import Base, utcnow


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    category = Column(String, default="general")
    address = Column(String, default="")
    pdf_file = Column(JSON, nullable=True)
    submitted_at = Column(DateTime, default=utcnow, index=True)
