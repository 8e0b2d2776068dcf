#!/usr/bin/env python3
"""
Match Reasons - Short human-readable explanations for a match.

Uses its own heuristics rather than the numeric breakdown, so the text reads
naturally and may mention a factor that only scored moderately.
"""

from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Sequence, Tuple

from core.matching.models import Commitment, FounderProfile, Role

MAX_REASONS = 3

# Ordered (primary role of a, primary role of b) pairs
STRONG_COMPLEMENTS: FrozenSet[Tuple[str, str]] = frozenset({
    (Role.TECHNICAL.value, Role.BUSINESS.value),
    (Role.BUSINESS.value, Role.TECHNICAL.value),
    (Role.TECHNICAL.value, Role.PRODUCT.value),
    (Role.PRODUCT.value, Role.TECHNICAL.value),
})

GOOD_COMPLEMENTS: FrozenSet[Tuple[str, str]] = frozenset({
    (Role.TECHNICAL.value, Role.DESIGN.value),
    (Role.DESIGN.value, Role.TECHNICAL.value),
    (Role.BUSINESS.value, Role.PRODUCT.value),
    (Role.PRODUCT.value, Role.BUSINESS.value),
    (Role.BUSINESS.value, Role.DESIGN.value),
    (Role.DESIGN.value, Role.BUSINESS.value),
    (Role.DESIGN.value, Role.PRODUCT.value),
    (Role.PRODUCT.value, Role.DESIGN.value),
})

COMMITMENT_LABELS: Mapping[str, str] = MappingProxyType({
    Commitment.FULL_TIME.value: "Both ready to go full-time",
    Commitment.PART_TIME.value: "Both working on this part-time",
    Commitment.EXPLORING.value: "Both exploring co-founder options",
})


def _role_label(role: str) -> str:
    return role.replace("_", " ").capitalize()


def _shared(values_a: Sequence[str], values_b: Sequence[str]) -> List[str]:
    """Values present on both sides, in the order `values_a` lists them."""
    others = set(values_b)
    seen = set()
    shared = []
    for value in values_a:
        if value in others and value not in seen:
            seen.add(value)
            shared.append(value)
    return shared


def _role_reason(a: FounderProfile, b: FounderProfile) -> Optional[str]:
    role_a, role_b = a.primary_role, b.primary_role
    if not role_a or not role_b or role_a == role_b:
        return None
    pair = (role_a, role_b)
    label = f"{_role_label(role_a)} + {_role_label(role_b)}"
    if pair in STRONG_COMPLEMENTS:
        return f"{label}: ideal co-founder pairing"
    if pair in GOOD_COMPLEMENTS:
        return f"{label}: strong complement"
    return f"Complementary roles: {_role_label(role_a)} and {_role_label(role_b)}"


def _commitment_reason(a: FounderProfile, b: FounderProfile) -> Optional[str]:
    if not a.commitment or a.commitment != b.commitment:
        return None
    return COMMITMENT_LABELS.get(a.commitment, f"Same commitment: {a.commitment.replace('_', ' ')}")


def _industry_reason(a: FounderProfile, b: FounderProfile) -> Optional[str]:
    shared = _shared(a.industries, b.industries)
    if len(shared) >= 2:
        return f"Shared interest in {shared[0]} and {shared[1]}"
    if len(shared) == 1:
        return f"Both interested in {shared[0]}"
    return None


def _location_reason(a: FounderProfile, b: FounderProfile) -> Optional[str]:
    if a.city and b.city and a.city == b.city:
        return f"Both based in {a.city}"
    if a.country and b.country and a.country == b.country:
        return f"Both in {a.country}"
    return None


def _language_reason(a: FounderProfile, b: FounderProfile) -> Optional[str]:
    shared = _shared(a.languages, b.languages)
    if len(shared) >= 2:
        return f"Both speak {shared[0]} and {shared[1]}"
    if len(shared) == 1:
        return f"Both speak {shared[0]}"
    return None


def generate_reasons(a: FounderProfile, b: FounderProfile) -> List[str]:
    """
    Explain why founder `b` is a good match for founder `a`.

    Returns at most three reasons, highest display priority first.
    """
    reasons: List[str] = []

    for build in (_role_reason, _commitment_reason, _industry_reason):
        reason = build(a, b)
        if reason:
            reasons.append(reason)

    if len(reasons) < MAX_REASONS:
        reason = _location_reason(a, b)
        if reason:
            reasons.append(reason)

    if len(reasons) < 2:
        reason = _language_reason(a, b)
        if reason:
            reasons.append(reason)

    return reasons[:MAX_REASONS]
