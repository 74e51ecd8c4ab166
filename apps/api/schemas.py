"""Response models shared by the admin routers."""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from apps.moderation.reports import ReportView
from models.safety import Sanction


def ok(data: Any, **extra: Any) -> dict[str, Any]:
    """Success envelope."""
    return {"success": True, "data": data, **extra, "timestamp": datetime.now(UTC).isoformat()}


class SanctionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    moderator_id: uuid.UUID
    moderator_username: str | None = None
    type: str
    reason: str
    description: str | None
    expires_at: datetime | None
    created_at: datetime

    @classmethod
    def build(cls, sanction: Sanction, moderator_username: str | None = None) -> "SanctionOut":
        out = cls.model_validate(sanction)
        return out.model_copy(update={"moderator_username": moderator_username})


class ContentOut(BaseModel):
    id: uuid.UUID
    author_id: uuid.UUID
    container_id: uuid.UUID
    body: str
    is_deleted: bool


class ReportOut(BaseModel):
    id: uuid.UUID
    content_type: str
    content_id: uuid.UUID
    reporter_id: uuid.UUID
    reporter_username: str | None
    reason: str
    status: str
    resolved_by: uuid.UUID | None
    resolver_username: str | None
    resolved_at: datetime | None
    resolution_notes: str | None
    created_at: datetime
    content: ContentOut | None

    @classmethod
    def build(cls, view: ReportView) -> "ReportOut":
        report = view.report
        content = view.content
        return cls(
            id=report.id,
            content_type=report.content_type,
            content_id=report.content_id,
            reporter_id=report.reporter_id,
            reporter_username=view.reporter_username,
            reason=report.reason,
            status=report.status,
            resolved_by=report.resolved_by,
            resolver_username=view.resolver_username,
            resolved_at=report.resolved_at,
            resolution_notes=report.resolution_notes,
            created_at=report.created_at,
            content=ContentOut(**content.to_dict()) if content else None,
        )


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    role: str
    domain: str | None
    xp: int
    level: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
