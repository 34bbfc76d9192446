# db.py
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from edututor.config import DATABASE_URL

Base = declarative_base()


def make_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        # FastAPI serves sync handlers from a threadpool
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, pool_recycle=3600)


def make_session_factory(bind):
    # Rows are handed back to the service layer after the session closes
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = make_engine()
SessionLocal = make_session_factory(engine)


@contextmanager
def get_session(factory=SessionLocal):
    db = factory()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=engine) -> None:
    """Create every table that does not exist yet."""
    from edututor import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=bind)
