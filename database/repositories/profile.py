import logging
from typing import Iterable, List, Optional

from sqlalchemy import select

from database.models import Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository):
    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def list_active_candidates(self, exclude_id: str) -> List[Profile]:
        stmt = select(Profile).where(
            Profile.is_actively_looking.is_(True),
            Profile.id != exclude_id
        ).order_by(Profile.id)
        return self.db.execute(stmt).scalars().all()

    def get_profiles_by_ids(self, user_ids: Iterable[str]) -> List[Profile]:
        ids = list(set(user_ids))
        if not ids:
            return []
        stmt = select(Profile).where(Profile.id.in_(ids))
        return self.db.execute(stmt).scalars().all()
