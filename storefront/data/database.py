# storefront/data/database.py
import threading
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.utils.settings import DATABASE_URL, STORE_LOCK_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def is_memory_url(url: str) -> bool:
    return url.startswith("sqlite") and (
        ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://")
    )


def create_db_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # in-memory sqlite lives in a single connection
        if is_memory_url(url):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class Database:
    """
    One store instance: an engine plus a session factory.
    Built once at process start (or once per test) and passed around explicitly.

    In-memory sqlite shares one connection between all sessions, so a commit
    in one session would commit another session's flushed rows. Sessions
    opened through exclusive_session() or get_db() hold `lock` for their
    whole lifetime.
    """

    def __init__(self, url: str | None = None):
        self.url = url or DATABASE_URL
        self.engine = create_db_engine(self.url)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self.lock = threading.Lock() if is_memory_url(self.url) else None

    def create_all(self) -> None:
        # registers every model on Base.metadata
        import storefront.data.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Tables ready: {list(Base.metadata.tables.keys())}")

    def session(self) -> Session:
        return self.SessionLocal()

    def acquire(self, timeout: float = STORE_LOCK_TIMEOUT_SECONDS) -> bool:
        if self.lock is None:
            return True
        return self.lock.acquire(timeout=timeout)

    def release(self) -> None:
        if self.lock is not None:
            self.lock.release()

    @contextmanager
    def exclusive_session(self) -> Iterator[Session]:
        if not self.acquire():
            raise TimeoutError("In-memory store is busy")
        try:
            with self.session() as db:
                yield db
        finally:
            self.release()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    database = request.app.state.database
    if not database.acquire():
        raise HTTPException(status_code=503, detail="Store is busy, retry later")

    # may be released from another worker thread; threading.Lock allows that
    try:
        with database.session() as db:
            yield db
    finally:
        database.release()
