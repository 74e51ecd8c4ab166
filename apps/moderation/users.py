"""Admin account management: listing, moderation counters, and role, status, domain and XP edits."""

import logging
import uuid
from dataclasses import asdict, dataclass, fields
from typing import Any

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from apps.gamification.levels import level_for_xp
from apps.moderation.filters import Page, UserFilter
from apps.moderation.sanctions import list_sanctions
from core.auth import ADMIN_ROLE, Actor
from core.db import unit_of_work, utcnow
from core.errors import InvalidDomain, InvalidRole, InvalidXp, NoUpdates, NotFound, SelfDemotion, Unauthorized
from core.metrics import user_updates_total
from models.content import Comment, Post
from models.safety import ModerationAction, Report, Sanction
from models.user import User

logger = logging.getLogger(__name__)

USER_ROLES = ("member", "domain_lead", ADMIN_ROLE)
DOMAINS = (
    "Game Development",
    "Game Design",
    "Game Art",
    "AI for Game Development",
    "Creative",
    "Corporate",
)


@dataclass(frozen=True)
class UserUpdate:
    """Fields an admin may change. None means unchanged."""

    role: str | None = None
    is_active: bool | None = None
    domain: str | None = None
    xp: int | None = None

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def validate_update(actor: Actor, user_id: uuid.UUID, changes: UserUpdate) -> dict[str, Any]:
    """Check an update before any write and return the columns to set."""
    values = changes.changes()
    if not values:
        raise NoUpdates()
    if changes.role is not None and changes.role not in USER_ROLES:
        raise InvalidRole()
    if changes.domain is not None and changes.domain not in DOMAINS:
        raise InvalidDomain()
    if changes.xp is not None and (isinstance(changes.xp, bool) or not isinstance(changes.xp, int) or changes.xp < 0):
        raise InvalidXp()
    if user_id == actor.id and changes.role is not None and changes.role != ADMIN_ROLE:
        raise SelfDemotion()
    if changes.xp is not None:
        values["level"] = level_for_xp(changes.xp)
    return values


async def update_user(db: AsyncSession, actor: Actor, user_id: uuid.UUID, changes: UserUpdate) -> User:
    """
    Apply an admin edit to a user account and log it.

    Raises:
        Unauthorized: Actor is not an admin
        NoUpdates, InvalidRole, InvalidDomain, InvalidXp, SelfDemotion: Bad input
        NotFound: User does not exist
        InternalError: Database failure (rolled back)
    """
    if not actor.is_admin:
        raise Unauthorized()
    values = validate_update(actor, user_id, changes)

    async with unit_of_work(db):
        now = utcnow()
        result = await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**values, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFound("User not found")

        db.add(
            ModerationAction(
                moderator_id=actor.id,
                content_type="user",
                content_id=user_id,
                action="update",
                reason="Admin user update",
                notes={"updates": changes.changes()},
                created_at=now,
            )
        )
        await db.flush()
        user = (
            await db.execute(select(User).where(User.id == user_id).execution_options(populate_existing=True))
        ).scalar_one()

    user_updates_total.inc()
    logger.info(f"User updated: id={user_id}, fields={sorted(values)}, moderator={actor.id}")
    return user


@dataclass(frozen=True)
class UserStats:
    """Activity and moderation counters shown on the admin user page."""

    post_count: int
    comment_count: int
    reports_made: int
    reports_received: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class UserDetail:
    user: User
    stats: UserStats
    sanctions: list[tuple[Sanction, str | None]]


def _post_count(user_id: Any) -> Any:
    return (
        select(func.count())
        .select_from(Post)
        .where(Post.author_id == user_id, Post.is_deleted.is_(False))
        .scalar_subquery()
    )


async def user_stats(db: AsyncSession, user_id: uuid.UUID) -> UserStats:
    """Count live posts and comments, reports filed, and reports against the user's content."""
    authored_posts = select(Post.id).where(Post.author_id == user_id)
    authored_comments = select(Comment.id).where(Comment.author_id == user_id)
    row = (
        await db.execute(
            select(
                _post_count(user_id).label("post_count"),
                select(func.count())
                .select_from(Comment)
                .where(Comment.author_id == user_id, Comment.is_deleted.is_(False))
                .scalar_subquery()
                .label("comment_count"),
                select(func.count())
                .select_from(Report)
                .where(Report.reporter_id == user_id)
                .scalar_subquery()
                .label("reports_made"),
                select(func.count())
                .select_from(Report)
                .where(
                    or_(
                        and_(Report.content_type == "post", Report.content_id.in_(authored_posts)),
                        and_(Report.content_type == "comment", Report.content_id.in_(authored_comments)),
                    )
                )
                .scalar_subquery()
                .label("reports_received"),
            )
        )
    ).one()
    return UserStats(**row._mapping)


async def get_user(db: AsyncSession, actor: Actor, user_id: uuid.UUID) -> UserDetail:
    """User account with its moderation counters and sanction history."""
    if not actor.is_admin:
        raise Unauthorized()

    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise NotFound("User not found")
    return UserDetail(
        user=user,
        stats=await user_stats(db, user_id),
        sanctions=await list_sanctions(db, actor, user_id),
    )


async def list_users(
    db: AsyncSession,
    actor: Actor,
    filters: UserFilter,
    page: Page,
) -> tuple[list[tuple[User, int]], dict[str, Any]]:
    """
    Admin user list with each user's live post count.

    Returns:
        ((user, post_count) pairs on the requested page, pagination description)
    """
    if not actor.is_admin:
        raise Unauthorized()

    conditions = filters.predicates()
    total = await db.scalar(select(func.count()).select_from(User).where(*conditions)) or 0

    post_count = _post_count(User.id).correlate(User)
    rows = (
        await db.execute(
            select(User, post_count.label("post_count"))
            .where(*conditions)
            .order_by(*filters.ordering())
            .limit(page.limit)
            .offset(page.offset)
        )
    ).all()
    return [(row[0], row[1]) for row in rows], page.describe(total)
