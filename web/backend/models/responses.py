#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from core.matching.models import ScoreBreakdown


class FounderSummary(BaseModel):
    """Profile fields another founder is allowed to see."""
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    headline: Optional[str] = None
    bio: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    country: Optional[str] = None
    city: Optional[str] = None
    languages: List[str] = Field(default_factory=list)
    commitment: Optional[str] = None
    idea_stage: Optional[str] = None
    looking_for_roles: List[str] = Field(default_factory=list)
    looking_for_description: Optional[str] = None
    ecosystem_tags: List[str] = Field(default_factory=list)


class RankedMatch(FounderSummary):
    """A freshly scored candidate."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "full_name": "Aigerim Sadykova",
                "roles": ["business"],
                "industries": ["Fintech"],
                "country": "Kazakhstan",
                "city": "Almaty",
                "languages": ["English", "Kazakh"],
                "commitment": "full_time",
                "idea_stage": "have_idea",
                "score": 75,
                "breakdown": {
                    "roles": 30,
                    "industry": 10,
                    "commitment": 20,
                    "stage": 0,
                    "location": 10,
                    "languages": 5
                },
                "reasons": [
                    "Technical + Business: ideal co-founder pairing",
                    "Both ready to go full-time",
                    "Both interested in Fintech"
                ]
            }
        }
    )

    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    reasons: List[str] = Field(default_factory=list, max_length=3)


class MatchesResponse(BaseModel):
    """Response containing the refreshed top matches."""
    success: bool
    count: int
    matches: List[RankedMatch]


class SavedMatch(BaseModel):
    """A persisted match with the counterpart's profile."""
    match_id: Optional[str]
    status: str
    score: int = Field(ge=0, le=100)
    breakdown: ScoreBreakdown
    last_computed_at: Optional[str]
    profile: FounderSummary


class SavedMatchesResponse(BaseModel):
    """Response containing persisted matches."""
    success: bool
    count: int
    active_count: int
    passed_count: int
    last_computed_at: Optional[str]
    matches: List[SavedMatch]


class MatchStatusResponse(BaseModel):
    """Response after passing on or restoring a match."""
    success: bool
    user_id: str
    status: str


class FactorInfo(BaseModel):
    """One scoring factor and the most points it can contribute."""
    key: str
    max_points: int


class FactorsResponse(BaseModel):
    """Response listing the scoring factors."""
    success: bool
    total_max: int
    factors: List[FactorInfo]
