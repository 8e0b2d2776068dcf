from sqlalchemy import Column, Text, Boolean, Integer, BigInteger, TIMESTAMP, Index, func

from .base import Base, JSONType


class Profile(Base):
    """
    Founder profile written by onboarding and the profile editor.

    Array fields are stored as JSON lists; `role[0]` is the primary role.
    `email`, `is_admin`, `telegram_id` and `profile_completeness` are
    internal and never returned to other founders.
    """
    __tablename__ = 'profiles'

    id = Column(Text, primary_key=True)
    full_name = Column(Text)
    avatar_url = Column(Text)
    headline = Column(Text)
    bio = Column(Text)

    role = Column(JSONType, nullable=False, default=list)
    skills = Column(JSONType, nullable=False, default=list)
    industries = Column(JSONType, nullable=False, default=list)
    languages = Column(JSONType, nullable=False, default=list)

    country = Column(Text)
    city = Column(Text)
    commitment = Column(Text)   # full_time|part_time|exploring
    idea_stage = Column(Text)   # no_idea|have_idea|side_project|early_traction|concept|prototype

    looking_for_roles = Column(JSONType, nullable=False, default=list)
    looking_for_description = Column(Text)
    ecosystem_tags = Column(JSONType, nullable=False, default=list)

    is_actively_looking = Column(Boolean, nullable=False, default=True)

    # Internal
    email = Column(Text)
    is_admin = Column(Boolean, nullable=False, default=False)
    telegram_id = Column(BigInteger)
    profile_completeness = Column(Integer, nullable=False, default=0)

    last_active = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_profiles_actively_looking', 'is_actively_looking'),
    )
