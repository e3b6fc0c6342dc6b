from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from unirivo.schemas.base import CamelModel


class ApplicationCreate(CamelModel):
    project_id: int
    role_id: int
    message: str | None = Field(default=None, max_length=2000)


class ApplicationStatusUpdate(CamelModel):
    status: Literal["PENDING", "SHORTLISTED", "ACCEPTED", "REJECTED", "REMOVED"]


class ShortlistRequest(CamelModel):
    project_id: int
    role_id: int
    user_id: int


class ApplicationOut(CamelModel):
    id: int
    project_id: int
    role_id: int
    user_id: int
    user_name: str | None = None
    user_email: str | None = None
    status: str
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MemberAddRequest(CamelModel):
    role_id: int
    email: str = Field(min_length=3, max_length=255)
