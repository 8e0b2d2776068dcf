#!/usr/bin/env python3
"""
Matching Module - Co-founder match scoring and ranking.

Public API:
- compute_score: Compatibility score between two founder profiles
- generate_reasons: Short explanations for why two founders match
- MatchOrchestrator: Refreshes, ranks and persists a founder's matches

Modules:
- models.py: Data structures (FounderProfile, ScoreBreakdown, MatchRecord, ...)
- score.py: Six-factor score calculation and its lookup tables
- reasons.py: Reason generation heuristics
- interfaces.py: Abstract profile, connection and match stores
- orchestrator.py: Candidate selection, ranking and persistence
- errors.py: Exceptions raised by the matching core
"""

from core.matching.models import FounderProfile, MatchScore, ScoreBreakdown, RankedCandidate, RefreshResult
from core.matching.score import compute_score
from core.matching.reasons import generate_reasons
from core.matching.orchestrator import MatchOrchestrator, rank_candidates

__all__ = [
    'FounderProfile',
    'MatchScore',
    'ScoreBreakdown',
    'RankedCandidate',
    'RefreshResult',
    'compute_score',
    'generate_reasons',
    'MatchOrchestrator',
    'rank_candidates',
]
