"""Database engine setup.

SQLite URLs get ``check_same_thread`` disabled and, for ``:memory:``, a
static pool so every session sees the same in-memory database. File-backed
SQLite URLs get their parent directory created.
"""

import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taxledger.core.config import settings
from taxledger.core.exceptions import ConfigurationError


def build_engine(url: str | None) -> Engine:
    if not url:
        raise ConfigurationError("DATABASE_URL")
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        database = make_url(url).database
        if not database or database == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            # SQLite creates the file but not its directory
            directory = os.path.dirname(database)
            if directory:
                os.makedirs(directory, exist_ok=True)
        return create_engine(url, future=True, **kwargs)
    return create_engine(
        url,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
