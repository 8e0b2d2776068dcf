#!/usr/bin/env python3
"""
Matching Models - Data structures shared by scoring, reasons and orchestration.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    TECHNICAL = "technical"
    BUSINESS = "business"
    DESIGN = "design"
    PRODUCT = "product"
    OPERATIONS = "operations"


class Commitment(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    EXPLORING = "exploring"


class IdeaStage(str, Enum):
    NO_IDEA = "no_idea"
    HAVE_IDEA = "have_idea"
    SIDE_PROJECT = "side_project"
    EARLY_TRACTION = "early_traction"
    CONCEPT = "concept"
    PROTOTYPE = "prototype"


class MatchStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    PASSED = "passed"


@dataclass(frozen=True)
class FounderProfile:
    """
    Read-only founder profile used as scoring input.

    List fields keep the order they were stored in: the first role is the
    founder's primary role. Scoring only looks at membership and overlap.
    Only fields that may be shown to other founders live here.
    """
    id: str
    roles: Tuple[str, ...] = ()
    industries: Tuple[str, ...] = ()
    commitment: Optional[str] = None
    idea_stage: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    languages: Tuple[str, ...] = ()
    is_actively_looking: bool = True

    # Display-only fields
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    headline: Optional[str] = None
    bio: Optional[str] = None
    skills: Tuple[str, ...] = ()
    looking_for_roles: Tuple[str, ...] = ()
    looking_for_description: Optional[str] = None
    ecosystem_tags: Tuple[str, ...] = ()

    @property
    def primary_role(self) -> Optional[str]:
        return self.roles[0] if self.roles else None


class ScoreBreakdown(BaseModel):
    """Per-factor points. Shape is fixed: unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    roles: int = Field(default=0, ge=0, le=30)
    industry: int = Field(default=0, ge=0, le=20)
    commitment: int = Field(default=0, ge=0, le=20)
    stage: int = Field(default=0, ge=0, le=10)
    location: int = Field(default=0, ge=0, le=10)
    languages: int = Field(default=0, ge=0, le=10)

    @property
    def total(self) -> int:
        return (
            self.roles + self.industry + self.commitment
            + self.stage + self.location + self.languages
        )


# Maximum points per factor, in display order
FACTOR_MAX_POINTS: Dict[str, int] = {
    "roles": 30,
    "industry": 20,
    "commitment": 20,
    "stage": 10,
    "location": 10,
    "languages": 10,
}


@dataclass(frozen=True)
class MatchScore:
    """Compatibility score between two founders."""
    total: int
    breakdown: ScoreBreakdown


def normalize_pair(user_id: str, other_user_id: str) -> Tuple[str, str]:
    """Return the pair ordered so that user_a < user_b."""
    if user_id == other_user_id:
        raise ValueError("A match pair needs two distinct users")
    return (user_id, other_user_id) if user_id < other_user_id else (other_user_id, user_id)


@dataclass
class MatchRecord:
    """Persisted match state for a normalized pair of founders."""
    user_a: str
    user_b: str
    score: int = 0
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    status: str = MatchStatus.PENDING.value
    last_computed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    def other_user(self, user_id: str) -> str:
        return self.user_b if self.user_a == user_id else self.user_a

    def involves(self, user_id: str) -> bool:
        return user_id in (self.user_a, self.user_b)


@dataclass(frozen=True)
class MatchUpsert:
    """Score fields written on every refresh of a pair."""
    user_a: str
    user_b: str
    score: int
    score_breakdown: ScoreBreakdown
    computed_at: datetime


@dataclass(frozen=True)
class ConnectionPair:
    requester_id: str
    recipient_id: str

    def other_user(self, user_id: str) -> str:
        return self.recipient_id if self.requester_id == user_id else self.requester_id


# Profile fields that may be returned to other founders
PROJECTION_FIELDS: Tuple[str, ...] = (
    "full_name",
    "avatar_url",
    "headline",
    "bio",
    "roles",
    "skills",
    "industries",
    "country",
    "city",
    "languages",
    "commitment",
    "idea_stage",
    "looking_for_roles",
    "looking_for_description",
    "ecosystem_tags",
)


def project_profile(profile: FounderProfile) -> Dict[str, Any]:
    """Whitelisted view of a profile for display to another founder."""
    data: Dict[str, Any] = {"user_id": profile.id}
    for name in PROJECTION_FIELDS:
        value = getattr(profile, name)
        data[name] = list(value) if isinstance(value, tuple) else value
    return data


@dataclass(frozen=True)
class RankedCandidate:
    """A scored candidate retained in a requester's top list."""
    profile: FounderProfile
    score: MatchScore
    reasons: List[str] = field(default_factory=list)

    def projection(self) -> Dict[str, Any]:
        data = project_profile(self.profile)
        data["score"] = self.score.total
        data["breakdown"] = self.score.breakdown.model_dump()
        data["reasons"] = list(self.reasons)
        return data


@dataclass
class RefreshResult:
    """Outcome of one refresh: the ranked list plus any persistence failures."""
    candidates: List[RankedCandidate] = field(default_factory=list)
    failed_pairs: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def fully_persisted(self) -> bool:
        return not self.failed_pairs
