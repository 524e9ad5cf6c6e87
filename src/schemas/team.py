from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from src.schemas.media import CamelModel


class TeamMemberCreate(CamelModel):
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    photo_url: str = Field(..., min_length=1)
    specialty: Optional[str] = None
    bio: Optional[str] = None
    photo_thumbnail_url: Optional[str] = None
    photo_key: Optional[str] = None
    order: int = 0
    is_active: bool = True


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = None
    role: Optional[str] = None
    specialty: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None
    photo_thumbnail_url: Optional[str] = None
    photo_key: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class TeamMemberOut(CamelModel):
    id: str
    name: str
    role: str
    specialty: Optional[str] = None
    bio: Optional[str] = None
    photo_url: str
    photo_thumbnail_url: Optional[str] = None
    photo_key: Optional[str] = None
    order: int = 0
    is_active: bool = True
    created_at: str


class TeamList(CamelModel):
    team: List[TeamMemberOut]
