from sqlalchemy import Column, Integer, String, DateTime
from chamber.db.base_class import Base, utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Stored trimmed + lowercased so the unique index is case-insensitive
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default=ROLE_USER, nullable=False)  # 'admin' or 'user'
    reset_password_token = Column(String, nullable=True, index=True)  # sha256 hex of the raw token
    reset_password_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
