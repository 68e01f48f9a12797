from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from collections.abc import Generator
from authors_api.core.config import settings
from authors_api.models.base import Base
import authors_api.models.author  # registers Author


def _connect_args(url: str) -> dict[str, object]:
    # TestClient and the threadpool share sqlite connections across threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    future=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def create_tables(bind: Engine | None = None) -> None:
    """Create the author table if it does not exist."""
    Base.metadata.create_all(bind=bind or engine)


# Get a database session for one request.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
