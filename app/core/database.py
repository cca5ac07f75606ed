# app/core/database.py
import logging
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _connect_args(url: str) -> dict:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Create the ``Active Issues`` and ``feedback_requests`` tables if missing."""
    # models register themselves on Base.metadata when imported
    import app.feedback.models  # noqa: F401
    import app.ticket.models  # noqa: F401

    target = bind or engine
    logger.info(f"Ensuring tables exist on {target.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=target)


# Common DB dependency
def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
