#!/usr/bin/env python3
"""
Test Fake Implementations - In-memory matching stores.

One object plays the profile, connection and match store, with hooks to
fail reads or individual upserts and to hold upserts open.
"""
import asyncio
from typing import Dict, Iterable, List, Optional, Set, Tuple

from core.matching.interfaces import ConnectionStore, MatchStore, ProfileStore
from core.matching.models import (
    ConnectionPair,
    FounderProfile,
    MatchRecord,
    MatchStatus,
    MatchUpsert,
    normalize_pair,
)


class InMemoryMatchingStore(ProfileStore, ConnectionStore, MatchStore):
    """
    Dict-backed stores with the same upsert semantics as the SQL store:
    new pairs start pending, refreshes never touch status.
    """

    def __init__(self, profiles: Iterable[FounderProfile] = ()):
        self.profiles: Dict[str, FounderProfile] = {p.id: p for p in profiles}
        self.connections: List[ConnectionPair] = []
        self.matches: Dict[Tuple[str, str], MatchRecord] = {}

        self.failing_reads: Set[str] = set()
        self.failing_pairs: Set[Tuple[str, str]] = set()
        self.upsert_gate: Optional[asyncio.Event] = None

        self.upsert_calls: List[MatchUpsert] = []
        self.in_flight = 0
        self.max_in_flight = 0

    # Test setup helpers

    def add_connection(self, requester_id: str, recipient_id: str) -> None:
        self.connections.append(ConnectionPair(requester_id=requester_id, recipient_id=recipient_id))

    def add_match(self, user_id: str, other_user_id: str, status: str, score: int = 50) -> MatchRecord:
        user_a, user_b = normalize_pair(user_id, other_user_id)
        record = MatchRecord(
            id=f"{user_a}:{user_b}",
            user_a=user_a,
            user_b=user_b,
            score=score,
            status=status,
        )
        self.matches[(user_a, user_b)] = record
        return record

    def _check(self, name: str) -> None:
        if name in self.failing_reads:
            raise ConnectionError(f"{name} unavailable")

    # ProfileStore

    async def get_profile(self, user_id: str) -> Optional[FounderProfile]:
        self._check("get_profile")
        return self.profiles.get(user_id)

    async def list_candidates(self, exclude_id: str) -> List[FounderProfile]:
        self._check("list_candidates")
        return [
            p for p in self.profiles.values()
            if p.is_actively_looking and p.id != exclude_id
        ]

    async def get_profiles(self, user_ids: Iterable[str]) -> List[FounderProfile]:
        self._check("get_profiles")
        return [self.profiles[i] for i in set(user_ids) if i in self.profiles]

    # ConnectionStore

    async def list_connections(self, user_id: str) -> List[ConnectionPair]:
        self._check("list_connections")
        return [c for c in self.connections if user_id in (c.requester_id, c.recipient_id)]

    # MatchStore

    async def list_matches(self, user_id: str, status: Optional[str] = None) -> List[MatchRecord]:
        self._check("list_matches")
        return [
            r for r in self.matches.values()
            if r.involves(user_id) and (status is None or r.status == status)
        ]

    async def get_match(self, user_a: str, user_b: str) -> Optional[MatchRecord]:
        self._check("get_match")
        return self.matches.get((user_a, user_b))

    async def upsert_match(self, upsert: MatchUpsert) -> None:
        self.upsert_calls.append(upsert)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.upsert_gate is not None:
                await self.upsert_gate.wait()
            else:
                await asyncio.sleep(0)

            key = (upsert.user_a, upsert.user_b)
            if key in self.failing_pairs:
                raise RuntimeError(f"write failed for {key}")

            record = self.matches.get(key)
            if record is None:
                self.matches[key] = MatchRecord(
                    id=f"{upsert.user_a}:{upsert.user_b}",
                    user_a=upsert.user_a,
                    user_b=upsert.user_b,
                    score=upsert.score,
                    score_breakdown=upsert.score_breakdown,
                    status=MatchStatus.PENDING.value,
                    last_computed_at=upsert.computed_at,
                )
            else:
                record.score = upsert.score
                record.score_breakdown = upsert.score_breakdown
                record.last_computed_at = upsert.computed_at
        finally:
            self.in_flight -= 1

    async def update_status(self, user_a: str, user_b: str, status: str) -> None:
        self.matches[(user_a, user_b)].status = status
