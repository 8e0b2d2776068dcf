#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.matching import MatchOrchestrator
from database.database import create_db_engine, create_session_factory
from database.repositories import SessionRepository
from database.stores import SqlMatchingStore
from .config import get_config
from .exceptions import UnauthenticatedException
from .services.match_service import MatchService


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self):
        config = get_config()
        self.engine = create_db_engine(
            config.database.url,
            pool_size=config.database.pool_size,
            max_overflow=config.database.max_overflow
        )
        self.SessionLocal = create_session_factory(self.engine)

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Global database manager, created on first use."""
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager().get_session()


def get_matching_store() -> SqlMatchingStore:
    """Matching stores bound to the shared session factory."""
    return SqlMatchingStore(get_db_manager().SessionLocal)


def get_match_service(store: SqlMatchingStore = Depends(get_matching_store)) -> MatchService:
    """MatchService wired to the SQL stores and matching configuration."""
    config = get_config()
    orchestrator = MatchOrchestrator(
        profiles=store,
        connections=store,
        matches=store,
        top_n=config.matching.top_n,
        upsert_concurrency=config.matching.upsert_concurrency,
    )
    return MatchService(orchestrator)


_bearer = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db)
) -> str:
    """
    Resolve the caller from an `Authorization: Bearer <token>` header.

    Raises:
        UnauthenticatedException: If the header is missing or the session
            is unknown or expired.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedException("Unauthorized")

    user_id = SessionRepository(db).get_user_id_for_token(credentials.credentials)
    if user_id is None:
        raise UnauthenticatedException("Unauthorized")
    return user_id
