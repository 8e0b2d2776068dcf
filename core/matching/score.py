#!/usr/bin/env python3
"""
Score Calculation - Compatibility score between two founder profiles.

Six additive factors, weights fixed:
- roles (0-30): best complementarity across the two role sets
- industry (0-20): Jaccard overlap of industries
- commitment (0-20): alignment of time commitment
- stage (0-10): proximity of idea stage
- location (0-10): same city, same country or neighbouring country
- languages (0-10): number of shared languages

Pure functions: absent or empty fields contribute 0, nothing raises.
"""

import math
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Sequence

from core.matching.models import FounderProfile, IdeaStage, MatchScore, Role, ScoreBreakdown


SAME_ROLE_SCORE = 5

# Keyed by unordered role pair, so lookups are symmetric
ROLE_COMPLEMENTARITY: Mapping[FrozenSet[str], int] = MappingProxyType({
    frozenset({Role.TECHNICAL.value, Role.BUSINESS.value}): 30,
    frozenset({Role.TECHNICAL.value, Role.PRODUCT.value}): 20,
    frozenset({Role.TECHNICAL.value, Role.DESIGN.value}): 20,
    frozenset({Role.TECHNICAL.value, Role.OPERATIONS.value}): 15,
    frozenset({Role.BUSINESS.value, Role.PRODUCT.value}): 15,
    frozenset({Role.BUSINESS.value, Role.DESIGN.value}): 15,
    frozenset({Role.BUSINESS.value, Role.OPERATIONS.value}): 10,
    frozenset({Role.DESIGN.value, Role.PRODUCT.value}): 15,
    frozenset({Role.DESIGN.value, Role.OPERATIONS.value}): 10,
    frozenset({Role.PRODUCT.value, Role.OPERATIONS.value}): 10,
})

KNOWN_ROLES: FrozenSet[str] = frozenset(role.value for role in Role)

# concept/prototype are valid stages elsewhere but have no place in this
# progression; they always score 0 on proximity.
STAGE_PROGRESSION: Sequence[str] = (
    IdeaStage.NO_IDEA.value,
    IdeaStage.HAVE_IDEA.value,
    IdeaStage.SIDE_PROJECT.value,
    IdeaStage.EARLY_TRACTION.value,
)

NEIGHBORING_COUNTRIES: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "Kazakhstan": frozenset({"Kyrgyzstan", "Uzbekistan", "Turkmenistan"}),
    "Kyrgyzstan": frozenset({"Kazakhstan", "Uzbekistan", "Tajikistan"}),
    "Uzbekistan": frozenset({"Kazakhstan", "Kyrgyzstan", "Tajikistan", "Turkmenistan"}),
    "Tajikistan": frozenset({"Kyrgyzstan", "Uzbekistan"}),
    "Turkmenistan": frozenset({"Kazakhstan", "Uzbekistan"}),
})


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def role_pair_score(role_a: str, role_b: str) -> int:
    """Complementarity of a single pair of roles, independent of order."""
    if role_a == role_b:
        return SAME_ROLE_SCORE if role_a in KNOWN_ROLES else 0
    return ROLE_COMPLEMENTARITY.get(frozenset((role_a, role_b)), 0)


def calculate_role_score(a: FounderProfile, b: FounderProfile) -> int:
    if not a.roles or not b.roles:
        return 0
    return max(role_pair_score(ra, rb) for ra in a.roles for rb in b.roles)


def calculate_industry_score(a: FounderProfile, b: FounderProfile) -> int:
    industries_a = set(a.industries)
    industries_b = set(b.industries)
    if not industries_a or not industries_b:
        return 0
    shared = len(industries_a & industries_b)
    union = len(industries_a | industries_b)
    return _round_half_up(20 * shared / union)


def calculate_commitment_score(a: FounderProfile, b: FounderProfile) -> int:
    if not a.commitment or not b.commitment:
        return 0
    if a.commitment == b.commitment:
        return 20
    if "exploring" in (a.commitment, b.commitment):
        return 5
    # full_time vs part_time: a mismatch, but both are serious
    return 10


def _stage_index(stage: Optional[str]) -> int:
    try:
        return STAGE_PROGRESSION.index(stage)
    except ValueError:
        return -1


def calculate_stage_score(a: FounderProfile, b: FounderProfile) -> int:
    if not a.idea_stage or not b.idea_stage:
        return 0
    index_a = _stage_index(a.idea_stage)
    index_b = _stage_index(b.idea_stage)
    if index_a < 0 or index_b < 0:
        return 0
    diff = abs(index_a - index_b)
    if diff == 0:
        return 10
    if diff == 1:
        return 5
    return 0


def are_neighbors(country_a: str, country_b: str) -> bool:
    return (
        country_b in NEIGHBORING_COUNTRIES.get(country_a, frozenset())
        or country_a in NEIGHBORING_COUNTRIES.get(country_b, frozenset())
    )


def calculate_location_score(a: FounderProfile, b: FounderProfile) -> int:
    if not a.country or not b.country:
        return 0
    if a.city and b.city and a.city == b.city:
        return 10
    if a.country == b.country:
        return 7
    if are_neighbors(a.country, b.country):
        return 4
    return 0


def calculate_language_score(a: FounderProfile, b: FounderProfile) -> int:
    languages_a = set(a.languages)
    languages_b = set(b.languages)
    if not languages_a or not languages_b:
        return 0
    shared = len(languages_a & languages_b)
    if shared >= 2:
        return 10
    if shared == 1:
        return 5
    return 0


def compute_score(a: FounderProfile, b: FounderProfile) -> MatchScore:
    """
    Compute the compatibility score of founder `a` with founder `b`.

    Args:
        a: The requesting founder
        b: The candidate founder

    Returns:
        MatchScore whose breakdown sums exactly to its total (0-100)
    """
    breakdown = ScoreBreakdown(
        roles=calculate_role_score(a, b),
        industry=calculate_industry_score(a, b),
        commitment=calculate_commitment_score(a, b),
        stage=calculate_stage_score(a, b),
        location=calculate_location_score(a, b),
        languages=calculate_language_score(a, b),
    )
    return MatchScore(total=breakdown.total, breakdown=breakdown)
