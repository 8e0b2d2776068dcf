#!/usr/bin/env python3
"""
SQL Stores - Profile, connection and match stores backed by SQLAlchemy.

Each call opens its own session on a worker thread, so concurrent upserts
from one refresh never share a Session. Read failures, including stored
match rows whose breakdown fails validation, surface as
UpstreamUnavailableError; write failures propagate unchanged so the
orchestrator can isolate them per pair.
"""

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.matching.errors import UpstreamUnavailableError
from core.matching.interfaces import ConnectionStore, MatchStore, ProfileStore
from core.matching.models import (
    FACTOR_MAX_POINTS,
    ConnectionPair,
    FounderProfile,
    MatchRecord,
    MatchUpsert,
    ScoreBreakdown,
)
from database.database import session_scope
from database.models import Match, Profile
from database.repositories import ConnectionRepository, MatchRepository, ProfileRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _as_tuple(value: Any) -> tuple:
    if not value:
        return ()
    # A bare string is one value, not a sequence of characters
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def to_founder_profile(row: Profile) -> FounderProfile:
    """Convert a profile row to the scoring model, dropping internal fields."""
    return FounderProfile(
        id=str(row.id),
        roles=_as_tuple(row.role),
        industries=_as_tuple(row.industries),
        commitment=row.commitment,
        idea_stage=row.idea_stage,
        country=row.country,
        city=row.city,
        languages=_as_tuple(row.languages),
        is_actively_looking=bool(row.is_actively_looking),
        full_name=row.full_name,
        avatar_url=row.avatar_url,
        headline=row.headline,
        bio=row.bio,
        skills=_as_tuple(row.skills),
        looking_for_roles=_as_tuple(row.looking_for_roles),
        looking_for_description=row.looking_for_description,
        ecosystem_tags=_as_tuple(row.ecosystem_tags),
    )


class InvalidStoredMatchError(ValueError):
    """A stored match row whose breakdown is malformed or does not sum to its score."""
    pass


def parse_breakdown(value: Any, score: int) -> ScoreBreakdown:
    """
    Validate a stored breakdown strictly.

    The breakdown must hold exactly the six factor keys with integer points
    inside each factor's bounds, and must sum to the stored score.

    Raises:
        InvalidStoredMatchError: If any of those checks fails.
    """
    if not isinstance(value, dict) or set(value) != set(FACTOR_MAX_POINTS):
        raise InvalidStoredMatchError(f"Stored score breakdown has the wrong shape: {value!r}")
    try:
        breakdown = ScoreBreakdown.model_validate(value, strict=True)
    except ValidationError as e:
        raise InvalidStoredMatchError(f"Invalid stored score breakdown {value!r}: {e}") from e
    if breakdown.total != score:
        raise InvalidStoredMatchError(
            f"Stored score {score} does not match breakdown total {breakdown.total}"
        )
    return breakdown


def to_match_record(row: Match) -> MatchRecord:
    return MatchRecord(
        id=str(row.id) if row.id is not None else None,
        user_a=row.user_a,
        user_b=row.user_b,
        score=int(row.score),
        score_breakdown=parse_breakdown(row.score_breakdown, int(row.score)),
        status=row.status,
        last_computed_at=row.last_computed_at,
        created_at=row.created_at,
    )


class SqlMatchingStore(ProfileStore, ConnectionStore, MatchStore):
    """All three matching stores over one SQLAlchemy session factory."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _read_sync(self, fn: Callable[[Session], T], what: str) -> T:
        try:
            with session_scope(self.session_factory) as session:
                return fn(session)
        except (SQLAlchemyError, InvalidStoredMatchError) as e:
            logger.error(f"Database read failed ({what}): {e}")
            raise UpstreamUnavailableError(f"Failed to load {what}") from e

    async def _read(self, fn: Callable[[Session], T], what: str) -> T:
        return await asyncio.to_thread(self._read_sync, fn, what)

    def _write_sync(self, fn: Callable[[Session], T]) -> T:
        with session_scope(self.session_factory) as session:
            return fn(session)

    async def _write(self, fn: Callable[[Session], T]) -> T:
        return await asyncio.to_thread(self._write_sync, fn)

    # ProfileStore

    async def get_profile(self, user_id: str) -> Optional[FounderProfile]:
        def load(session: Session) -> Optional[FounderProfile]:
            row = ProfileRepository(session).get_profile(user_id)
            return to_founder_profile(row) if row is not None else None
        return await self._read(load, "profile")

    async def list_candidates(self, exclude_id: str) -> List[FounderProfile]:
        def load(session: Session) -> List[FounderProfile]:
            rows = ProfileRepository(session).list_active_candidates(exclude_id)
            return [to_founder_profile(row) for row in rows]
        return await self._read(load, "candidate profiles")

    async def get_profiles(self, user_ids: Iterable[str]) -> List[FounderProfile]:
        ids = list(user_ids)

        def load(session: Session) -> List[FounderProfile]:
            rows = ProfileRepository(session).get_profiles_by_ids(ids)
            return [to_founder_profile(row) for row in rows]
        return await self._read(load, "profiles")

    # ConnectionStore

    async def list_connections(self, user_id: str) -> List[ConnectionPair]:
        def load(session: Session) -> List[ConnectionPair]:
            rows = ConnectionRepository(session).list_connections_for_user(user_id)
            return [ConnectionPair(requester_id=r.requester_id, recipient_id=r.recipient_id) for r in rows]
        return await self._read(load, "connections")

    # MatchStore

    async def list_matches(self, user_id: str, status: Optional[str] = None) -> List[MatchRecord]:
        def load(session: Session) -> List[MatchRecord]:
            rows = MatchRepository(session).list_matches_for_user(user_id, status=status)
            return [to_match_record(row) for row in rows]
        return await self._read(load, "matches")

    async def get_match(self, user_a: str, user_b: str) -> Optional[MatchRecord]:
        def load(session: Session) -> Optional[MatchRecord]:
            row = MatchRepository(session).get_pair(user_a, user_b)
            return to_match_record(row) if row is not None else None
        return await self._read(load, "match")

    async def upsert_match(self, upsert: MatchUpsert) -> None:
        def write(session: Session) -> None:
            MatchRepository(session).upsert_score(
                user_a=upsert.user_a,
                user_b=upsert.user_b,
                score=upsert.score,
                score_breakdown=upsert.score_breakdown.model_dump(),
                computed_at=upsert.computed_at,
            )
        await self._write(write)

    async def update_status(self, user_a: str, user_b: str, status: str) -> None:
        def write(session: Session) -> None:
            MatchRepository(session).set_status(user_a, user_b, status)
        await self._write(write)
