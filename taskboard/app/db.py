from typing import Any, Dict

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str, *, connect_timeout: int = 5) -> Engine:
    """Build an engine for ``database_url`` without connecting yet."""

    connect_args: Dict[str, Any] = {}
    kwargs: Dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        # SQLite requires check_same_thread=False for usage across threads
        connect_args["check_same_thread"] = False
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty db
            kwargs["poolclass"] = StaticPool
    else:
        connect_args["connect_timeout"] = connect_timeout
        kwargs["pool_pre_ping"] = True

    return create_engine(database_url, connect_args=connect_args, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def ensure_schema(engine: Engine) -> None:
    """Create the tasks table and its indexes when missing (idempotent)."""

    from taskboard.app import models  # noqa: F401  registers TaskRecord on Base

    Base.metadata.create_all(bind=engine)
