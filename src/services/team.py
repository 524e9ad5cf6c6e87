"""
src/services/team.py

Team member metadata operations that own a photo asset.

The record is always written first. Only once the write has succeeded is
the previous photo handed to the supersession coordinator, so a failed
update never loses the photo the record still points at.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from src.errors import NotFoundError, ValidationError
from src.repositories.team_repo import InMemoryTeamRepo
from src.schemas.media import CleanupOutcome
from src.schemas.team import TeamMemberCreate, TeamMemberOut, TeamMemberUpdate
from src.services.keys import derive_key_from_url
from src.services.supersession import SupersessionCoordinator

logger = logging.getLogger("media_lifecycle")


class TeamService:
    def __init__(self, repo: InMemoryTeamRepo, coordinator: SupersessionCoordinator, public_base_url: str):
        self._repo = repo
        self._coordinator = coordinator
        self._base = public_base_url

    def list(self, include_inactive: bool = False) -> List[TeamMemberOut]:
        return [TeamMemberOut(**row) for row in self._repo.list(include_inactive)]

    def create(self, payload: TeamMemberCreate) -> TeamMemberOut:
        data = payload.model_dump()
        data["photo_key"] = payload.photo_key or derive_key_from_url(payload.photo_url, self._base)
        row = self._repo.create(data)
        logger.info("TEAM created: id=%s photo_key=%s", row["id"], row["photo_key"])
        return TeamMemberOut(**row)

    def update(self, member_id: str, payload: TeamMemberUpdate) -> TeamMemberOut:
        fields = payload.model_dump(exclude_unset=True)
        # empty strings do not overwrite the required columns
        for required in ("name", "role", "photo_url"):
            if required in fields and not fields[required]:
                fields.pop(required)
        # null never clears a non-nullable column
        for column in ("order", "is_active"):
            if column in fields and fields[column] is None:
                fields.pop(column)
        if not fields:
            raise ValidationError("No updates provided")

        existing = self._repo.get(member_id)
        if existing is None:
            raise NotFoundError("Team member not found")

        new_url: Optional[str] = fields.get("photo_url")
        if new_url and "photo_key" not in fields:
            fields["photo_key"] = derive_key_from_url(new_url, self._base)

        row = self._repo.update(member_id, fields)
        if row is None:
            raise NotFoundError("Team member not found")

        if new_url:
            outcome = self._coordinator.supersede(
                existing.get("photo_url"),
                new_url,
                existing_key=existing.get("photo_key"),
            )
            logger.info("TEAM photo cleanup: id=%s outcome=%s", member_id, outcome.model_dump())

        return TeamMemberOut(**row)

    def delete(self, member_id: str) -> CleanupOutcome:
        existing = self._repo.delete(member_id)
        if existing is None:
            raise NotFoundError("Team member not found")
        return self._coordinator.release(existing.get("photo_url"), key=existing.get("photo_key"))
