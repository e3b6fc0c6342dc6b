from __future__ import annotations

from datetime import datetime

from pydantic import Field

from unirivo.schemas.base import CamelModel


class NotificationOut(CamelModel):
    id: int
    type: str
    title: str
    message: str
    link: str | None = None
    project_id: int | None = None
    application_id: int | None = None
    read: bool = False
    created_at: datetime | None = None


class NotificationListOut(CamelModel):
    notifications: list[NotificationOut] = Field(default_factory=list)
    unread_count: int = 0
