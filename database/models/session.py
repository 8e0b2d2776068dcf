from sqlalchemy import Column, Text, TIMESTAMP, Index, func

from .base import Base


class UserSession(Base):
    """
    Login session issued by the auth service. A user may hold a session
    before onboarding has created their profile.

    Only the sha256 hex digest of the bearer token is stored.
    """
    __tablename__ = 'user_sessions'

    token_hash = Column(Text, primary_key=True)
    user_id = Column(Text, nullable=False)
    expires_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_user_sessions_user', 'user_id'),
    )
