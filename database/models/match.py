import uuid

from sqlalchemy import Column, Text, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, CheckConstraint, Index, Uuid, func

from .base import Base, JSONType


class Match(Base):
    """
    Match state for an unordered pair of founders.

    The pair is stored normalized (user_a < user_b) so both members resolve
    to the same row. The pair check compares ids bytewise (COLLATE "C" on
    Postgres, SQLite's default BINARY collation), which is the same order
    Python uses for str comparison. Refreshes rewrite score, score_breakdown and
    last_computed_at; status only changes through pass/undo.
    """
    __tablename__ = 'matches'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_a = Column(Text, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    user_b = Column(Text, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)

    score = Column(Integer, nullable=False, default=0)
    score_breakdown = Column(JSONType, nullable=False, default=dict)

    status = Column(Text, nullable=False, default='pending')  # pending|active|passed
    last_computed_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('user_a', 'user_b', name='uq_matches_pair'),
        CheckConstraint('user_a < user_b COLLATE "C"', name='ck_matches_pair_order').ddl_if(dialect='postgresql'),
        CheckConstraint('user_a < user_b', name='ck_matches_pair_order_binary').ddl_if(dialect='sqlite'),
        Index('idx_matches_user_b', 'user_b'),
        Index('idx_matches_status', 'status'),
        Index('idx_matches_score', 'score'),
    )
