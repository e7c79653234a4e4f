"""
Process-scoped state shared by request handlers.

Built once per application by ``AppState.build`` and torn down by ``close``;
handlers receive the pieces through dependencies in ``chamber.api.deps``.
"""
import functools
import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from chamber.core import security
from chamber.core.config import Settings
from chamber.db.session import create_db_engine, create_session_factory
from chamber.services.email import EmailService
from chamber.services.image_optimizer import ImageOptimizer
from chamber.services.rate_limit import RateLimiter
from chamber.services.realtime import Broadcaster
from chamber.services.storage import UploadStorage

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    storage: UploadStorage
    image_optimizer: ImageOptimizer
    email: EmailService
    broadcaster: Broadcaster
    auth_limiter: RateLimiter

    @classmethod
    def build(cls, settings: Settings) -> "AppState":
        engine = create_db_engine(settings)
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            storage=UploadStorage(settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE,
                                  public_prefix=f"{settings.API_PREFIX}/files"),
            image_optimizer=ImageOptimizer(settings.IMAGE_MAX_WIDTH, settings.IMAGE_MAX_HEIGHT,
                                           settings.IMAGE_QUALITY),
            email=EmailService.from_settings(settings),
            broadcaster=Broadcaster(
                settings.cors_origins,
                functools.partial(security.decode_access_token, settings=settings),
                message_queue=settings.SOCKETIO_MESSAGE_QUEUE,
            ),
            auth_limiter=RateLimiter(settings.AUTH_RATE_LIMIT_MAX, settings.AUTH_RATE_LIMIT_WINDOW),
        )

    def close(self) -> None:
        self.auth_limiter.reset()
        self.engine.dispose()
        logger.info("Application state closed")
