"""Sanction ledger: the one place sanctions are written."""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from core.auth import Actor
from core.db import unit_of_work, utcnow
from core.errors import InvalidDuration, InvalidType, MissingReason, NotFound, SelfSanction, Unauthorized
from core.metrics import sanctions_created_total, sanctions_latency_seconds
from models.safety import ModerationAction, Sanction
from models.user import User

logger = logging.getLogger(__name__)

SANCTION_TYPES = ("warning", "temporary_ban", "permanent_ban")
BAN_TYPES = frozenset({"temporary_ban", "permanent_ban"})
MAX_BAN_HOURS = 5 * 365 * 24  # longer bans are permanent_ban


@dataclass(frozen=True)
class SanctionRequest:
    """Input of the shared sanction primitive."""

    user_id: uuid.UUID
    moderator_id: uuid.UUID
    type: str
    reason: str
    description: str | None = None
    duration_hours: int | str | None = None


def parse_duration(raw: int | str | None) -> int:
    """
    Parse a temporary ban duration in hours.

    Accepts positive integers and strings holding one ("24"), up to
    MAX_BAN_HOURS.

    Raises:
        InvalidDuration: If the value is missing, not an integer, not positive or too long
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidDuration()
    try:
        hours = int(raw)
    except (TypeError, ValueError):
        raise InvalidDuration() from None
    if hours <= 0 or hours > MAX_BAN_HOURS:
        raise InvalidDuration()
    return hours


def validate_sanction(request: SanctionRequest) -> int | None:
    """
    Check a sanction request without touching the database.

    Returns:
        Ban length in hours for temporary bans, None otherwise

    Raises:
        SelfSanction, InvalidType, MissingReason, InvalidDuration
    """
    if request.user_id == request.moderator_id:
        raise SelfSanction()
    if request.type not in SANCTION_TYPES:
        raise InvalidType()
    if not request.reason or not request.reason.strip():
        raise MissingReason()
    if request.type == "temporary_ban":
        return parse_duration(request.duration_hours)
    return None


async def apply_sanction(
    db: AsyncSession,
    request: SanctionRequest,
    *,
    now: datetime,
    audit: bool = True,
) -> Sanction:
    """
    Insert a sanction and apply its effect on the account.

    Must run inside a unit of work. Bans deactivate the sanctioned user.
    With audit=True a moderation action tagged with the sanction type is
    logged against the user; callers that log against other content pass
    audit=False and write their own row.

    Args:
        db: Database session inside a transaction
        request: Sanction details
        now: Creation time; temporary ban expiry is computed from it
        audit: Whether to write the user-level moderation action

    Returns:
        The flushed Sanction row
    """
    hours = validate_sanction(request)
    expires_at = now + timedelta(hours=hours) if hours is not None else None

    sanction = Sanction(
        user_id=request.user_id,
        moderator_id=request.moderator_id,
        type=request.type,
        reason=request.reason.strip(),
        description=request.description or None,
        expires_at=expires_at,
        created_at=now,
    )
    db.add(sanction)

    if request.type in BAN_TYPES:
        await db.execute(
            update(User)
            .where(User.id == request.user_id)
            .values(is_active=False, updated_at=now)
            .execution_options(synchronize_session=False)
        )

    if audit:
        db.add(
            ModerationAction(
                moderator_id=request.moderator_id,
                content_type="user",
                content_id=request.user_id,
                action=request.type,
                reason=sanction.reason,
                notes={
                    "description": request.description,
                    "duration": hours,
                    "expires_at": expires_at.isoformat() if expires_at else None,
                },
                created_at=now,
            )
        )

    await db.flush()
    return sanction


async def create_sanction(
    db: AsyncSession,
    actor: Actor,
    target_user_id: uuid.UUID,
    type: str,
    reason: str,
    description: str | None = None,
    duration_hours: int | str | None = None,
) -> Sanction:
    """
    Sanction a user directly from the admin back office.

    Input is validated before any I/O. The existence check, sanction insert,
    account deactivation and audit row share one transaction.

    Raises:
        Unauthorized: Actor is not an admin
        SelfSanction, InvalidType, MissingReason, InvalidDuration: Bad input
        NotFound: Target user does not exist
        InternalError: Database failure (rolled back)
    """
    if not actor.is_admin:
        raise Unauthorized()

    request = SanctionRequest(
        user_id=target_user_id,
        moderator_id=actor.id,
        type=type,
        reason=reason,
        description=description,
        duration_hours=duration_hours,
    )
    validate_sanction(request)

    t0 = time.perf_counter()
    try:
        async with unit_of_work(db):
            exists = await db.scalar(select(User.id).where(User.id == target_user_id))
            if exists is None:
                raise NotFound("User not found")
            sanction = await apply_sanction(db, request, now=utcnow())
    finally:
        sanctions_latency_seconds.observe(time.perf_counter() - t0)

    sanctions_created_total.labels(type=sanction.type).inc()
    logger.info(f"Sanction created: user={target_user_id}, type={sanction.type}, moderator={actor.id}")
    return sanction


async def list_sanctions(db: AsyncSession, actor: Actor, user_id: uuid.UUID) -> list[tuple[Sanction, str | None]]:
    """Sanction history of a user, newest first, with the moderator's username."""
    if not actor.is_admin:
        raise Unauthorized()

    moderator = aliased(User)
    result = await db.execute(
        select(Sanction, moderator.username)
        .outerjoin(moderator, moderator.id == Sanction.moderator_id)
        .where(Sanction.user_id == user_id)
        .order_by(Sanction.created_at.desc())
    )
    return [(row[0], row[1]) for row in result.all()]
