import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Index, Uuid, func

from .base import Base


class Connection(Base):
    """Connection request between two founders (pending|accepted|declined)."""
    __tablename__ = 'connections'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    requester_id = Column(Text, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    recipient_id = Column(Text, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    message = Column(Text)
    status = Column(Text, nullable=False, default='pending')
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_connections_requester', 'requester_id'),
        Index('idx_connections_recipient', 'recipient_id'),
    )
