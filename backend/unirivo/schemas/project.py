from __future__ import annotations

from datetime import datetime

from pydantic import Field

from unirivo.schemas.base import CamelModel


class RoleIn(CamelModel):
    id: int | None = None
    role_name: str = Field(min_length=1, max_length=255)
    mandatory_skills: list[str] = Field(default_factory=list)
    optional_skills: list[str] = Field(default_factory=list)
    needed: int = Field(default=1, ge=1)


class RoleOut(CamelModel):
    id: int
    role_name: str
    mandatory_skills: list[str] | None = None
    optional_skills: list[str] | None = None
    needed: int
    filled: int


class ProjectCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    roles: list[RoleIn] = Field(default_factory=list)


class ProjectUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    roles: list[RoleIn] | None = None


class ProjectOut(CamelModel):
    id: int
    owner_id: int
    title: str
    description: str | None = None
    status: str
    roles: list[RoleOut] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
