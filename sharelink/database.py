"""Database configuration and session management."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from sharelink.config import DATABASE_URL, DB_TIMEOUT


class Base(DeclarativeBase):
    pass


def make_engine(url: str = DATABASE_URL, timeout: float = DB_TIMEOUT) -> Engine:
    """Engine whose every call is bounded by ``timeout`` seconds."""
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout}
        return create_engine(url, connect_args=connect_args, echo=False)

    return create_engine(
        url,
        connect_args={"connect_timeout": int(timeout)},
        pool_timeout=timeout,
        pool_pre_ping=True,
        echo=False,
    )


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


engine = make_engine()

SessionLocal = make_session_factory(engine)


def init_db(bind: Engine = engine):
    import sharelink.orm  # noqa: F401  registers every model on Base.metadata

    Base.metadata.create_all(bind=bind)
