#!/usr/bin/env python3
"""
Matching exceptions.
"""

from typing import List, Tuple


class MatchingError(Exception):
    """Base exception for the matching core."""
    pass


class ProfileNotFoundError(MatchingError):
    """Raised when the requesting founder has no profile (onboarding incomplete)."""

    def __init__(self, user_id: str):
        super().__init__(f"Profile {user_id} not found. Please complete onboarding first.")
        self.user_id = user_id


class UpstreamUnavailableError(MatchingError):
    """Raised when a profile, connection or match store read fails."""
    pass


class MatchNotFoundError(MatchingError):
    """Raised when no match record exists for a pair."""
    pass


class InvalidStatusTransitionError(MatchingError):
    """Raised when a match status change is not allowed."""
    pass


class PartialPersistenceFailure(MatchingError):
    """
    One or more pair upserts failed during a refresh.

    Recorded and logged by the orchestrator, never raised to the caller:
    the scores are still valid and the next refresh rewrites them.
    """

    def __init__(self, failed_pairs: List[Tuple[str, str]], total: int):
        super().__init__(f"Failed to persist {len(failed_pairs)} of {total} matches")
        self.failed_pairs = failed_pairs
        self.total = total
