"""Database configuration and session management utilities."""
from __future__ import annotations

import contextlib
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from superfishal.config import ensure_data_dir

Base = declarative_base()


def create_db_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Build an engine; in-memory SQLite shares one connection across threads."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            future=True,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    ensure_data_dir(database_url)
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, future=True, echo=echo, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


def init_db(engine: Engine) -> None:
    """Create database tables for all registered models."""
    from superfishal.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextlib.contextmanager
def get_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "get_session",
    "init_db",
]
