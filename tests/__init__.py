#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run against in-memory fakes or an in-memory SQLite database,
so no external services are needed:

    # Run all tests
    python -m pytest tests/ -v

    # Using unittest
    python -m unittest discover tests -v
"""

from sqlalchemy.pool import StaticPool

from core.matching.models import FounderProfile
from database.database import create_db_engine, create_session_factory


def make_profile(user_id: str, **overrides) -> FounderProfile:
    """
    Build a FounderProfile with list fields given as lists or tuples.

    Args:
        user_id: Profile id.
        **overrides: Any FounderProfile field.
    """
    fields = dict(overrides)
    for name in ("roles", "industries", "languages", "skills", "looking_for_roles", "ecosystem_tags"):
        if name in fields:
            fields[name] = tuple(fields[name])
    return FounderProfile(id=user_id, **fields)


def create_sqlite_engine():
    """
    In-memory SQLite engine with all tables created.

    StaticPool keeps a single connection so worker threads used by the
    SQL stores see the same database.
    """
    from database.models import Base

    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine
