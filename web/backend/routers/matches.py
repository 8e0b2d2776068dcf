#!/usr/bin/env python3
"""
Match endpoints - refresh, list and manage co-founder matches.
"""

import logging
from fastapi import APIRouter, Depends, Path, Query

from ..dependencies import get_current_user_id, get_match_service
from ..services.match_service import MatchService
from ..models.responses import (
    FactorsResponse,
    MatchesResponse,
    MatchStatusResponse,
    SavedMatchesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("", response_model=MatchesResponse)
async def refresh_matches(
    user_id: str = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service)
):
    """
    Recompute the caller's top matches, save them and return them.

    Candidates already connected to the caller, or passed on, are never
    returned. Matches are sorted by score (highest first).
    """
    return await service.refresh_matches(user_id)


@router.get("/factors", response_model=FactorsResponse)
def get_factors():
    """
    List the scoring factors and the maximum points each contributes.
    """
    return MatchService.get_factors()


@router.get("/saved", response_model=SavedMatchesResponse)
async def get_saved_matches(
    status: str = Query(default="all", pattern="^(all|active|passed)$", description="Match status: active, passed, or all"),
    user_id: str = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service)
):
    """
    Get previously computed matches involving the caller.

    "active" covers pending and active matches; "passed" covers dismissed ones.
    """
    return await service.get_saved_matches(user_id, status=status)


@router.post("/{other_user_id}/pass", response_model=MatchStatusResponse)
async def pass_match(
    other_user_id: str = Path(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service)
):
    """
    Dismiss a suggested co-founder. Passed matches are not resurfaced by refreshes.
    """
    return await service.pass_match(user_id, other_user_id)


@router.post("/{other_user_id}/undo", response_model=MatchStatusResponse)
async def undo_pass(
    other_user_id: str = Path(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service)
):
    """
    Restore a previously passed match.
    """
    return await service.undo_pass(user_id, other_user_id)
