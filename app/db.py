"""Database engine/session wiring.

The engine and session factory are created once at startup (see `app.main`)
and kept on `app.state`; request handlers receive a session via `get_db`.
"""

from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    kwargs = {"pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
    return create_engine(database_url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db(request: Request) -> Iterator[Session]:
    """Yield một session cho mỗi request, luôn đóng khi xong."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


__all__ = ["Base", "make_engine", "make_session_factory", "get_db"]
