import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from chamber.core.config import Settings
from chamber.core.security import hash_password
from chamber.db.base import Base
from chamber.models.user import User, ROLE_ADMIN

logger = logging.getLogger(__name__)


def init_db(db: Session, engine: Engine, settings: Settings) -> None:
    """Create tables and make sure the bootstrap admin exists."""
    Base.metadata.create_all(bind=engine)
    _ensure_bootstrap_admin(db, settings)


def _ensure_bootstrap_admin(db: Session, settings: Settings) -> None:
    """Create the bootstrap admin once; an existing account is never overwritten."""
    email = settings.BOOTSTRAP_ADMIN_EMAIL.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        logger.info(f"Admin user already exists: {email}")
        return

    admin = User(
        name="Admin",
        email=email,
        hashed_password=hash_password(settings.BOOTSTRAP_ADMIN_PASSWORD, settings.BCRYPT_ROUNDS),
        role=ROLE_ADMIN,
    )
    db.add(admin)
    db.commit()
    logger.info(f"Created default admin user: {email}")
