# streetfood_connect/database/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from streetfood_connect.config import settings


class Base(DeclarativeBase):
    pass


def create_database_engine(database_url: str = None):
    url = database_url or settings.DATABASE_URL
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # in-memory sqlite lives on a single connection shared by every thread
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, pool_pre_ping=True, future=True, echo=settings.DEBUG, **kwargs)


def create_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True, expire_on_commit=False)


def init_database(engine) -> None:
    # models must be imported so their tables register on Base.metadata
    from streetfood_connect import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
