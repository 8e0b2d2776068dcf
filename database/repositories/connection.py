from typing import List

from sqlalchemy import select, or_

from database.models import Connection
from database.repositories.base import BaseRepository


class ConnectionRepository(BaseRepository):
    def list_connections_for_user(self, user_id: str) -> List[Connection]:
        """All connections where the user is requester or recipient, any status."""
        stmt = select(Connection).where(
            or_(Connection.requester_id == user_id, Connection.recipient_id == user_id)
        )
        return self.db.execute(stmt).scalars().all()
