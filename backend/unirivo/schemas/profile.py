from __future__ import annotations

from pydantic import Field

from unirivo.schemas.base import CamelModel


class ProfileStats(CamelModel):
    projects_owned: int = 0
    projects_joined: int = 0
    projects_completed: int = 0


class ProfileOut(CamelModel):
    id: int
    email: str
    name: str
    bio: str | None = None
    location: str | None = None
    skills: list[str] = Field(default_factory=list)
    tech_stack: list[str] = Field(default_factory=list)
    stats: ProfileStats = Field(default_factory=ProfileStats)


class ProfileUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    bio: str | None = None
    location: str | None = Field(default=None, max_length=255)
    skills: list[str] | None = None
    tech_stack: list[str] | None = None
