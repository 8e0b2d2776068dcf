"""Service layer for the co-founder matching API."""

from .match_service import MatchService

__all__ = ['MatchService']
