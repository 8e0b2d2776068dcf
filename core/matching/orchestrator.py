#!/usr/bin/env python3
"""
Match Orchestrator - Candidate selection, ranking and persistence of matches.

For one requesting founder:
1. Load the requester's profile (ProfileNotFoundError if absent)
2. Load the pool of actively looking founders, excluding the requester
3. Exclude founders already connected (any status) or passed on
4. Score, rank by total (ties by candidate id) and keep the top N
5. Upsert one record per normalized pair, concurrently and status-preserving
6. Return the ranked candidates

Reads abort the refresh with UpstreamUnavailableError. Upsert failures are
isolated per pair and reported on the result, never raised.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Set, Tuple, TypeVar

from core.matching.errors import (
    InvalidStatusTransitionError,
    MatchingError,
    MatchNotFoundError,
    PartialPersistenceFailure,
    ProfileNotFoundError,
    UpstreamUnavailableError,
)
from core.matching.interfaces import ConnectionStore, MatchStore, ProfileStore
from core.matching.models import (
    FounderProfile,
    MatchRecord,
    MatchStatus,
    MatchUpsert,
    RankedCandidate,
    RefreshResult,
    normalize_pair,
)
from core.matching.reasons import generate_reasons
from core.matching.score import compute_score

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TOP_N = 20
DEFAULT_UPSERT_CONCURRENCY = 8

# Statuses a match may move from, keyed by target status
STATUS_TRANSITIONS = {
    MatchStatus.PASSED.value: {MatchStatus.PENDING.value, MatchStatus.ACTIVE.value},
    MatchStatus.ACTIVE.value: {MatchStatus.PASSED.value},
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def rank_candidates(
    requester: FounderProfile,
    candidates: List[FounderProfile],
    top_n: int = DEFAULT_TOP_N,
) -> List[RankedCandidate]:
    """
    Score every candidate against the requester and keep the best `top_n`.

    Sorted by total score descending; equal scores are ordered by candidate
    id so the ranking does not depend on store enumeration order.
    """
    scored = [(candidate, compute_score(requester, candidate)) for candidate in candidates]
    scored.sort(key=lambda item: (-item[1].total, item[0].id))
    return [
        RankedCandidate(
            profile=candidate,
            score=score,
            reasons=generate_reasons(requester, candidate),
        )
        for candidate, score in scored[:top_n]
    ]


class MatchOrchestrator:
    """Runs match refreshes and status changes against the external stores."""

    def __init__(
        self,
        profiles: ProfileStore,
        connections: ConnectionStore,
        matches: MatchStore,
        top_n: int = DEFAULT_TOP_N,
        upsert_concurrency: int = DEFAULT_UPSERT_CONCURRENCY,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        if upsert_concurrency < 1:
            raise ValueError("upsert_concurrency must be at least 1")
        self.profiles = profiles
        self.connections = connections
        self.matches = matches
        self.top_n = top_n
        self.upsert_concurrency = upsert_concurrency
        self.clock = clock

    async def refresh_matches(self, user_id: str) -> RefreshResult:
        """
        Recompute and persist the requester's top matches.

        Args:
            user_id: The requesting founder's id.

        Returns:
            RefreshResult with the ranked candidates (possibly empty) and the
            pairs whose upsert failed.

        Raises:
            ProfileNotFoundError: If the requester has no profile.
            UpstreamUnavailableError: If any store read fails.
        """
        requester = await self._read(self.profiles.get_profile(user_id), "requester profile")
        if requester is None:
            raise ProfileNotFoundError(user_id)

        pool = await self._read(self.profiles.list_candidates(exclude_id=user_id), "candidate profiles")
        if not pool:
            logger.info(f"No candidates available for {user_id}")
            return RefreshResult()

        excluded = await self._build_exclusion_set(user_id)
        eligible = [c for c in pool if c.id != user_id and c.id not in excluded]

        ranked = rank_candidates(requester, eligible, self.top_n)
        logger.info(
            f"Scored {len(eligible)} of {len(pool)} candidates for {user_id} "
            f"({len(excluded)} excluded), keeping {len(ranked)}"
        )

        failed_pairs = await self._persist(user_id, ranked)
        return RefreshResult(candidates=ranked, failed_pairs=failed_pairs)

    async def list_saved_matches(self, user_id: str) -> List[Tuple[MatchRecord, FounderProfile]]:
        """
        Persisted matches involving the user, best score first, each paired
        with the counterpart's profile. Records whose counterpart profile no
        longer exists are skipped. Every status is returned; callers filter.
        """
        records = await self._read(self.matches.list_matches(user_id), "match records")
        if not records:
            return []

        other_ids = [record.other_user(user_id) for record in records]
        profiles = await self._read(self.profiles.get_profiles(other_ids), "matched profiles")
        by_id = {profile.id: profile for profile in profiles}

        saved = []
        for record in sorted(records, key=lambda r: (-r.score, r.other_user(user_id))):
            profile = by_id.get(record.other_user(user_id))
            if profile is not None:
                saved.append((record, profile))
        return saved

    async def pass_match(self, user_id: str, other_user_id: str) -> MatchRecord:
        """Dismiss a suggestion: pending/active -> passed."""
        return await self._transition(user_id, other_user_id, MatchStatus.PASSED.value)

    async def undo_pass(self, user_id: str, other_user_id: str) -> MatchRecord:
        """Bring a dismissed suggestion back: passed -> active."""
        return await self._transition(user_id, other_user_id, MatchStatus.ACTIVE.value)

    # Private helpers

    async def _read(self, awaitable: Awaitable[T], what: str) -> T:
        try:
            return await awaitable
        except MatchingError:
            raise
        except Exception as e:
            logger.error(f"Failed to load {what}: {e}", exc_info=True)
            raise UpstreamUnavailableError(f"Failed to load {what}") from e

    async def _build_exclusion_set(self, user_id: str) -> Set[str]:
        connections = await self._read(self.connections.list_connections(user_id), "connections")
        passed = await self._read(
            self.matches.list_matches(user_id, status=MatchStatus.PASSED.value),
            "passed matches",
        )

        excluded = {conn.other_user(user_id) for conn in connections}
        excluded.update(
            record.other_user(user_id)
            for record in passed
            if record.status == MatchStatus.PASSED.value
        )
        excluded.discard(user_id)
        return excluded

    async def _persist(self, user_id: str, ranked: List[RankedCandidate]) -> List[Tuple[str, str]]:
        if not ranked:
            return []

        computed_at = self.clock()
        semaphore = asyncio.Semaphore(self.upsert_concurrency)
        upserts = []
        for candidate in ranked:
            user_a, user_b = normalize_pair(user_id, candidate.profile.id)
            upserts.append(MatchUpsert(
                user_a=user_a,
                user_b=user_b,
                score=candidate.score.total,
                score_breakdown=candidate.score.breakdown,
                computed_at=computed_at,
            ))

        async def write(upsert: MatchUpsert) -> None:
            async with semaphore:
                await self.matches.upsert_match(upsert)

        # Upserts run to completion even if the caller is cancelled
        results = await asyncio.shield(
            asyncio.gather(*(write(u) for u in upserts), return_exceptions=True)
        )

        failed_pairs = []
        for upsert, result in zip(upserts, results):
            if isinstance(result, Exception):
                logger.warning(f"Failed to upsert match ({upsert.user_a}, {upsert.user_b}): {result}")
                failed_pairs.append((upsert.user_a, upsert.user_b))
            elif isinstance(result, BaseException):
                raise result

        if failed_pairs:
            failure = PartialPersistenceFailure(failed_pairs, total=len(upserts))
            logger.warning(f"Match refresh for {user_id}: {failure}")
        return failed_pairs

    async def _transition(self, user_id: str, other_user_id: str, target: str) -> MatchRecord:
        user_a, user_b = normalize_pair(user_id, other_user_id)
        record = await self._read(self.matches.get_match(user_a, user_b), "match record")
        if record is None:
            raise MatchNotFoundError(f"No match between {user_a} and {user_b}")

        if record.status == target:
            return record
        if record.status not in STATUS_TRANSITIONS.get(target, set()):
            raise InvalidStatusTransitionError(
                f"Cannot change match status from {record.status} to {target}"
            )

        await self.matches.update_status(user_a, user_b, target)
        record.status = target
        logger.info(f"Match ({user_a}, {user_b}) is now {target} (by {user_id})")
        return record
