"""
Store Interfaces - Abstract collaborators used by the MatchOrchestrator.

Implementations raise UpstreamUnavailableError when a read cannot be served.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from core.matching.models import ConnectionPair, FounderProfile, MatchRecord, MatchUpsert


class ProfileStore(ABC):

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[FounderProfile]:
        """Return the founder's profile, or None if onboarding is incomplete."""
        pass

    @abstractmethod
    async def list_candidates(self, exclude_id: str) -> List[FounderProfile]:
        """Return every actively looking profile except `exclude_id`."""
        pass

    @abstractmethod
    async def get_profiles(self, user_ids: Iterable[str]) -> List[FounderProfile]:
        """Return the profiles that exist among `user_ids`."""
        pass


class ConnectionStore(ABC):

    @abstractmethod
    async def list_connections(self, user_id: str) -> List[ConnectionPair]:
        """Return all connections involving the user, whatever their status."""
        pass


class MatchStore(ABC):

    @abstractmethod
    async def list_matches(self, user_id: str, status: Optional[str] = None) -> List[MatchRecord]:
        """Return match records involving the user, optionally filtered by status."""
        pass

    @abstractmethod
    async def get_match(self, user_a: str, user_b: str) -> Optional[MatchRecord]:
        pass

    @abstractmethod
    async def upsert_match(self, upsert: MatchUpsert) -> None:
        """
        Insert-or-update keyed by (user_a, user_b).

        New rows start as pending. Existing rows only get score,
        score_breakdown and last_computed_at rewritten; status is kept.
        """
        pass

    @abstractmethod
    async def update_status(self, user_a: str, user_b: str, status: str) -> None:
        pass
