import hashlib
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, or_

from database.models import UserSession
from database.repositories.base import BaseRepository


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


class SessionRepository(BaseRepository):
    def get_user_id_for_token(self, token: str, now: Optional[datetime] = None) -> Optional[str]:
        """Resolve a bearer token to a user id, ignoring expired sessions."""
        if not token:
            return None

        now = now or datetime.now(timezone.utc)
        stmt = select(UserSession.user_id).where(
            UserSession.token_hash == hash_token(token),
            or_(UserSession.expires_at.is_(None), UserSession.expires_at > now)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_session(self, user_id: str, token: str, expires_at: Optional[datetime] = None) -> UserSession:
        session = UserSession(
            token_hash=hash_token(token),
            user_id=user_id,
            expires_at=expires_at
        )
        self.db.add(session)
        return session
