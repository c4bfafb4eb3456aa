from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, Query, Response, status

from watchtrack.api.deps import get_search_controller
from watchtrack.api.presenters.search_results import build_result_cards
from watchtrack.schemas.tmdb import (
    SearchFailureOut,
    SearchSuccess,
    SearchSuccessOut,
    TitleAction,
    TitleActionOut,
)
from watchtrack.services.search_controller import SearchController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tmdb", tags=["tmdb"])


@router.get(
    "/search",
    response_model=SearchSuccessOut | SearchFailureOut,
    responses={204: {"description": "Blank query ignored"}},
)
async def tmdb_search_route(
    query: str = Query(""),
    controller: SearchController = Depends(get_search_controller),
):
    outcome = await controller.submit(query)
    if outcome is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if isinstance(outcome, SearchSuccess):
        return SearchSuccessOut(items=build_result_cards(outcome.items))
    return SearchFailureOut(message=outcome.message)


@router.post(
    "/{media_type}/{tmdb_id}/actions/{action}",
    response_model=TitleActionOut,
    status_code=status.HTTP_202_ACCEPTED,
)
async def tmdb_title_action_route(
    action: TitleAction,
    media_type: str = Path(..., pattern="^(movie|tv)$"),
    tmdb_id: int = Path(..., ge=1),
):
    # v1: actions are acknowledged but not stored
    logger.info("Title action action=%s media_type=%s tmdb_id=%s", action.value, media_type, tmdb_id)
    return TitleActionOut(action=action, media_type=media_type, tmdb_id=tmdb_id)
