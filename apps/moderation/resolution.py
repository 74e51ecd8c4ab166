"""Report resolution: one transactional pending -> terminal transition with its side effects."""

import logging
import time
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from apps.moderation.content import content_ref
from apps.moderation.reports import load_pending, mark_terminal
from apps.moderation.sanctions import SanctionRequest, apply_sanction
from core.auth import Actor
from core.config import settings
from core.db import unit_of_work, utcnow
from core.errors import InvalidAction, NotFound, Unauthorized
from core.metrics import reports_resolution_latency_seconds, reports_resolved_total
from models.safety import ModerationAction

logger = logging.getLogger(__name__)

REPORT_ACTIONS = ("dismiss", "resolve_delete", "resolve_warn", "resolve_ban")


@dataclass(frozen=True)
class ResolutionResult:
    report_id: uuid.UUID
    action: str
    status: str


def terminal_status(action: str) -> str:
    return "dismissed" if action == "dismiss" else "resolved"


async def resolve_report(
    db: AsyncSession,
    actor: Actor,
    report_id: uuid.UUID,
    action: str,
    resolution_notes: str | None = None,
) -> ResolutionResult:
    """
    Resolve a pending report.

    Actions:
    - dismiss: status becomes dismissed, nothing else happens
    - resolve_delete: soft-deletes the reported post or comment
    - resolve_warn: warning sanction for the content author
    - resolve_ban: temporary ban (settings.report_ban_hours) for the author,
      whose account is deactivated

    Every action except dismiss appends a moderation action row. All writes
    share one transaction; no retry is attempted on failure.

    Args:
        db: Database session with no transaction in progress
        actor: Acting user
        report_id: Report to resolve
        action: One of REPORT_ACTIONS
        resolution_notes: Free text kept on the report

    Returns:
        Report ID, action and the new status

    Raises:
        Unauthorized: Actor is not an admin
        InvalidAction: Unknown action
        NotFound: Report missing or not pending, or the reported content is gone
        InternalError: Database failure (rolled back)
    """
    if not actor.is_admin:
        raise Unauthorized()
    if action not in REPORT_ACTIONS:
        raise InvalidAction()

    status = terminal_status(action)
    t0 = time.perf_counter()
    try:
        async with unit_of_work(db):
            report = await load_pending(db, report_id)
            if report is None:
                raise NotFound("Report not found or already resolved")

            ref = content_ref(report.content_type, report.content_id)
            content = await ref.snapshot(db) if action != "dismiss" else None
            if action != "dismiss" and content is None:
                raise NotFound("Reported content not found")

            now = utcnow()
            if not await mark_terminal(db, report_id, status, actor.id, resolution_notes, now):
                raise NotFound("Report not found or already resolved")

            label = None
            if action == "resolve_delete":
                await ref.soft_delete(db)
                label = "delete"
            elif action in ("resolve_warn", "resolve_ban"):
                ban = action == "resolve_ban"
                await apply_sanction(
                    db,
                    SanctionRequest(
                        user_id=content.author_id,
                        moderator_id=actor.id,
                        type="temporary_ban" if ban else "warning",
                        reason=f"Content violation: {report.reason}",
                        description=(
                            f"{'Temporary ban' if ban else 'Warning'} issued for reported content. "
                            f"Report ID: {report_id}"
                        ),
                        duration_hours=settings.report_ban_hours if ban else None,
                    ),
                    now=now,
                    audit=False,
                )
                label = "ban" if ban else "warn"

            if label is not None:
                db.add(
                    ModerationAction(
                        moderator_id=actor.id,
                        content_type=report.content_type,
                        content_id=report.content_id,
                        action=label,
                        reason=f"Report resolution: {report.reason}",
                        notes={
                            "report_id": str(report_id),
                            "action": action,
                            "resolution_notes": resolution_notes,
                        },
                        created_at=now,
                    )
                )
    finally:
        reports_resolution_latency_seconds.observe(time.perf_counter() - t0)

    reports_resolved_total.labels(action=action).inc()
    logger.info(f"Report resolved: id={report_id}, action={action}, status={status}, moderator={actor.id}")
    return ResolutionResult(report_id=report_id, action=action, status=status)
