#!/usr/bin/env python3
"""
Match service - business logic for co-founder match operations.
"""

import logging

from core.matching import MatchOrchestrator
from core.matching.errors import (
    InvalidStatusTransitionError,
    MatchNotFoundError,
    ProfileNotFoundError,
    UpstreamUnavailableError,
)
from core.matching.models import (
    FACTOR_MAX_POINTS,
    FounderProfile,
    MatchRecord,
    MatchStatus,
    project_profile,
)
from ..models.responses import (
    FactorInfo,
    FactorsResponse,
    FounderSummary,
    MatchesResponse,
    MatchStatusResponse,
    RankedMatch,
    SavedMatch,
    SavedMatchesResponse,
)
from ..utils import safe_datetime_iso
from ..exceptions import (
    InvalidMatchStatusException,
    MatchNotFoundException,
    ProfileNotFoundException,
    UpstreamUnavailableException,
)

logger = logging.getLogger(__name__)


class MatchService:
    """Service for refreshing and managing co-founder matches."""

    def __init__(self, orchestrator: MatchOrchestrator):
        self.orchestrator = orchestrator

    async def refresh_matches(self, user_id: str) -> MatchesResponse:
        """
        Recompute the caller's top matches and persist them.

        An empty list is a valid result ("no matches yet"), not an error.
        Persistence failures are logged by the orchestrator and do not
        affect the response.

        Raises:
            ProfileNotFoundException: If the caller has no profile.
            UpstreamUnavailableException: If a store read fails.
        """
        try:
            result = await self.orchestrator.refresh_matches(user_id)
        except ProfileNotFoundError as e:
            raise ProfileNotFoundException(
                "Profile not found. Please complete onboarding first."
            ) from e
        except UpstreamUnavailableError as e:
            raise UpstreamUnavailableException(str(e)) from e

        if not result.fully_persisted:
            logger.warning(
                f"Returning {len(result.candidates)} matches for {user_id}; "
                f"{len(result.failed_pairs)} were not saved"
            )

        matches = [RankedMatch(**candidate.projection()) for candidate in result.candidates]
        return MatchesResponse(success=True, count=len(matches), matches=matches)

    async def get_saved_matches(self, user_id: str, status: str = "all") -> SavedMatchesResponse:
        """
        Get persisted matches involving the caller.

        Args:
            user_id: The caller.
            status: "all", "active" (pending and active) or "passed".
        """
        try:
            saved = await self.orchestrator.list_saved_matches(user_id)
        except UpstreamUnavailableError as e:
            raise UpstreamUnavailableException(str(e)) from e

        passed = [(r, p) for r, p in saved if r.status == MatchStatus.PASSED.value]
        active = [(r, p) for r, p in saved if r.status != MatchStatus.PASSED.value]

        if status == "active":
            selected = active
        elif status == "passed":
            selected = passed
        else:
            selected = saved

        computed = [r.last_computed_at for r, _ in saved if r.last_computed_at is not None]

        return SavedMatchesResponse(
            success=True,
            count=len(selected),
            active_count=len(active),
            passed_count=len(passed),
            last_computed_at=safe_datetime_iso(max(computed)) if computed else None,
            matches=[self._to_saved_match(record, profile) for record, profile in selected],
        )

    async def pass_match(self, user_id: str, other_user_id: str) -> MatchStatusResponse:
        return await self._change_status(self.orchestrator.pass_match, user_id, other_user_id)

    async def undo_pass(self, user_id: str, other_user_id: str) -> MatchStatusResponse:
        return await self._change_status(self.orchestrator.undo_pass, user_id, other_user_id)

    @staticmethod
    def get_factors() -> FactorsResponse:
        factors = [FactorInfo(key=key, max_points=points) for key, points in FACTOR_MAX_POINTS.items()]
        return FactorsResponse(
            success=True,
            total_max=sum(f.max_points for f in factors),
            factors=factors,
        )

    # Private helper methods

    async def _change_status(self, action, user_id: str, other_user_id: str) -> MatchStatusResponse:
        if user_id == other_user_id:
            raise MatchNotFoundException("Cannot match with yourself")
        try:
            record = await action(user_id, other_user_id)
        except MatchNotFoundError as e:
            raise MatchNotFoundException(str(e)) from e
        except InvalidStatusTransitionError as e:
            raise InvalidMatchStatusException(str(e)) from e
        except UpstreamUnavailableError as e:
            raise UpstreamUnavailableException(str(e)) from e

        return MatchStatusResponse(success=True, user_id=other_user_id, status=record.status)

    def _to_saved_match(self, record: MatchRecord, profile: FounderProfile) -> SavedMatch:
        """Convert a match record and counterpart profile to a SavedMatch."""
        return SavedMatch(
            match_id=record.id,
            status=record.status,
            score=record.score,
            breakdown=record.score_breakdown,
            last_computed_at=safe_datetime_iso(record.last_computed_at),
            profile=FounderSummary(**project_profile(profile)),
        )
