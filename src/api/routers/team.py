from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_team_service, require_admin
from src.api.errors import http_error
from src.errors import MediaError
from src.schemas.team import TeamList, TeamMemberCreate, TeamMemberUpdate
from src.services.team import TeamService

logger = logging.getLogger("team_router")

router = APIRouter(prefix="/api/team", tags=["team"])


@router.get("", response_model=TeamList)
def list_team(
    include_inactive: bool = Query(False, alias="includeInactive"),
    service: TeamService = Depends(get_team_service),
):
    return TeamList(team=service.list(include_inactive))


@router.post("", dependencies=[Depends(require_admin)])
def create_member(body: TeamMemberCreate, service: TeamService = Depends(get_team_service)):
    member = service.create(body)
    return {"team": member.model_dump(by_alias=True)}


@router.patch("", dependencies=[Depends(require_admin)])
def update_member(
    body: TeamMemberUpdate,
    id: str = Query(...),
    service: TeamService = Depends(get_team_service),
):
    try:
        member = service.update(id, body)
    except MediaError as e:
        logger.warning("team update failed: id=%s error=%s", id, e)
        raise http_error(e)
    return {"team": member.model_dump(by_alias=True)}


@router.delete("", dependencies=[Depends(require_admin)])
def delete_member(id: str = Query(...), service: TeamService = Depends(get_team_service)):
    try:
        outcome = service.delete(id)
    except MediaError as e:
        raise http_error(e)
    return {"success": True, "cleanup": outcome.model_dump(by_alias=True)}
