"""Report store: reads for the moderation queue and the pending -> terminal transition."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from apps.moderation.content import ContentSnapshot, content_ref
from apps.moderation.filters import Page, ReportFilter
from core.auth import Actor
from core.errors import NotFound, Unauthorized
from models.safety import Report
from models.user import User


@dataclass(frozen=True)
class ReportView:
    """Report with reporter/resolver names and the content it points at."""

    report: Report
    reporter_username: str | None
    resolver_username: str | None
    content: ContentSnapshot | None


def _report_query():
    reporter = aliased(User)
    resolver = aliased(User)
    return (
        select(Report, reporter.username, resolver.username)
        .outerjoin(reporter, reporter.id == Report.reporter_id)
        .outerjoin(resolver, resolver.id == Report.resolved_by)
    )


async def _view(db: AsyncSession, row: Any) -> ReportView:
    report, reporter_username, resolver_username = row
    content = await content_ref(report.content_type, report.content_id).snapshot(db)
    return ReportView(
        report=report,
        reporter_username=reporter_username,
        resolver_username=resolver_username,
        content=content,
    )


async def load_pending(db: AsyncSession, report_id: uuid.UUID, *, lock: bool = True) -> Report | None:
    """
    Read a report that is still pending.

    With lock=True the row is selected FOR UPDATE, so a concurrent resolver
    waits and then sees the committed terminal status.
    """
    query = select(Report).where(Report.id == report_id, Report.status == "pending")
    if lock:
        query = query.with_for_update()
    return (await db.execute(query)).scalar_one_or_none()


async def mark_terminal(
    db: AsyncSession,
    report_id: uuid.UUID,
    status: str,
    actor_id: uuid.UUID,
    notes: str | None,
    now: datetime,
) -> bool:
    """
    Move a pending report to a terminal status.

    Returns:
        False if the report was no longer pending (nothing written)
    """
    result = await db.execute(
        update(Report)
        .where(Report.id == report_id, Report.status == "pending")
        .values(status=status, resolved_by=actor_id, resolved_at=now, resolution_notes=notes)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def get_report(db: AsyncSession, actor: Actor, report_id: uuid.UUID) -> ReportView:
    """Report detail in any status."""
    if not actor.is_admin:
        raise Unauthorized()

    row = (await db.execute(_report_query().where(Report.id == report_id))).first()
    if row is None:
        raise NotFound("Report not found")
    return await _view(db, row)


async def list_reports(
    db: AsyncSession,
    actor: Actor,
    filters: ReportFilter,
    page: Page,
) -> tuple[list[ReportView], dict[str, Any]]:
    """
    Moderation queue, newest first.

    Returns:
        (reports on the requested page, pagination description)
    """
    if not actor.is_admin:
        raise Unauthorized()

    conditions = filters.predicates()
    total = await db.scalar(select(func.count()).select_from(Report).where(*conditions)) or 0

    rows = (
        await db.execute(
            _report_query()
            .where(*conditions)
            .order_by(Report.created_at.desc(), Report.id)
            .limit(page.limit)
            .offset(page.offset)
        )
    ).all()

    views = [await _view(db, row) for row in rows]
    return views, page.describe(total)
