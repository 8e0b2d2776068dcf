import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from database.models import Match
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    'postgresql': pg_insert,
    'sqlite': sqlite_insert,
}

# Columns a refresh may overwrite on an existing pair; status is never among them
REFRESH_COLUMNS = ('score', 'score_breakdown', 'last_computed_at')


class MatchRepository(BaseRepository):
    def get_pair(self, user_a: str, user_b: str) -> Optional[Match]:
        stmt = select(Match).where(
            Match.user_a == user_a,
            Match.user_b == user_b
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_matches_for_user(
        self,
        user_id: str,
        status: Optional[str] = None
    ) -> List[Match]:
        stmt = select(Match).where(
            or_(Match.user_a == user_id, Match.user_b == user_id)
        )

        if status is not None:
            stmt = stmt.where(Match.status == status)

        stmt = stmt.order_by(Match.score.desc(), Match.user_a, Match.user_b)
        return self.db.execute(stmt).scalars().all()

    def upsert_score(
        self,
        user_a: str,
        user_b: str,
        score: int,
        score_breakdown: Dict[str, Any],
        computed_at: datetime
    ) -> None:
        """
        Atomically insert or refresh the score of a normalized pair.

        New pairs are inserted as pending. On conflict with the
        (user_a, user_b) unique constraint only REFRESH_COLUMNS are updated,
        so a concurrent refresh by the other member cannot reset status.
        """
        if user_a >= user_b:
            raise ValueError(f"Pair must be normalized (user_a < user_b): {user_a}, {user_b}")

        insert_fn = _INSERT_BY_DIALECT.get(self.dialect_name)
        if insert_fn is None:
            raise NotImplementedError(f"Upsert not supported for dialect {self.dialect_name}")

        stmt = insert_fn(Match).values(
            id=uuid.uuid4(),
            user_a=user_a,
            user_b=user_b,
            score=score,
            score_breakdown=score_breakdown,
            status='pending',
            last_computed_at=computed_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Match.user_a, Match.user_b],
            set_={column: stmt.excluded[column] for column in REFRESH_COLUMNS}
        )
        self.db.execute(stmt)

    def set_status(self, user_a: str, user_b: str, status: str) -> int:
        stmt = update(Match).where(
            Match.user_a == user_a,
            Match.user_b == user_b
        ).values(status=status)
        result = self.db.execute(stmt)

        if result.rowcount:
            logger.info(f"Set match ({user_a}, {user_b}) status to {status}")

        return result.rowcount
