"""Admin moderation queue and report resolution endpoints."""

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import get_db
from apps.api.schemas import ReportOut, ok
from apps.moderation import get_report, list_reports, resolve_report
from apps.moderation.filters import Page, ReportFilter
from core.auth import Actor, actor_auth

router = APIRouter(prefix="/admin/reports", tags=["admin", "moderation"])


class ResolveIn(BaseModel):
    """Input model for resolving a report."""

    action: str  # dismiss|resolve_delete|resolve_warn|resolve_ban
    resolution_notes: str | None = None


@router.get("")
async def moderation_queue(
    status: str | None = "pending",
    content_type: str | None = None,
    reason: str | None = None,
    page: int = 1,
    limit: int = 20,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """
    List reports for the moderation queue, newest first.

    An empty status query value lists reports in every status.
    """
    filters = ReportFilter(status=status or None, content_type=content_type, reason=reason)
    views, pagination = await list_reports(db, actor, filters, Page.of(page, limit))
    return ok([ReportOut.build(v).model_dump(mode="json") for v in views], pagination=pagination)


@router.get("/{report_id}")
async def report_detail(
    report_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """Get detailed report information."""
    view = await get_report(db, actor, report_id)
    return ok(ReportOut.build(view).model_dump(mode="json"))


@router.put("/{report_id}")
async def resolve(
    report_id: uuid.UUID,
    body: ResolveIn,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """
    Resolve a pending report.

    Returns:
        {"report_id", "action", "status"} inside the success envelope
    """
    result = await resolve_report(db, actor, report_id, body.action, body.resolution_notes)
    return ok({"report_id": str(result.report_id), "action": result.action, "status": result.status})
