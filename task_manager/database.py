import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task, User  # noqa: F401

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _create_engine(url: str, echo: bool = False):
    if url.startswith("sqlite"):
        if _is_memory_sqlite(url):
            # A single shared connection, otherwise every session sees its own empty database.
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

    # Neon/Postgres: disable pooling for serverless and enable pre-ping
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


class Database:
    """Explicit handle on the task store.

    Built once at process start (see ``create_app``), shared through
    ``app.state.database``, and disposed at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = _create_engine(url, echo=echo)
        self._session_factory = sessionmaker(
            bind=self.engine,
            class_=Session,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_tables(self) -> None:
        """Create all database tables."""
        SQLModel.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Get a database session (context manager style).

        Usage:
            with database.session() as session:
                # do something with session
        """
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        logger.info("Disposing database engine for %s", self.engine.url.render_as_string(hide_password=True))
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """Dependency to get database session."""
    with get_database(request).session() as session:
        yield session
