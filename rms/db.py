from typing import Optional

from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from .config import settings


Base = declarative_base()


def build_engine(
    database_url: str,
    pool_size: Optional[int] = None,
    max_overflow: Optional[int] = None,
    timeout_s: Optional[int] = None,
) -> Engine:
    """Create a pooled engine with bounded pool size and connect/checkout timeouts."""
    timeout_s = timeout_s if timeout_s is not None else settings.db_timeout_s
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout_s}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # A single shared connection, otherwise each checkout sees an empty database
            return create_engine(database_url, future=True, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_url, future=True, connect_args=connect_args)

    return create_engine(
        database_url,
        future=True,
        pool_pre_ping=True,
        pool_size=pool_size if pool_size is not None else settings.db_pool_size,
        max_overflow=max_overflow if max_overflow is not None else settings.db_max_overflow,
        pool_timeout=timeout_s,
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args={
            "connect_timeout": timeout_s,
            "options": f"-c statement_timeout={timeout_s * 1000}",
        },
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    # IMPORTANT: do not use scoped_session with async frameworks; create a fresh Session per operation
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
