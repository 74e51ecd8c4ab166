"""Admin user management and sanction endpoints."""

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import get_db
from apps.api.schemas import SanctionOut, UserOut, ok
from apps.gamification.levels import xp_progress
from apps.moderation import UserUpdate, create_sanction, get_user, list_sanctions, list_users, update_user
from apps.moderation.filters import Page, UserFilter
from core.auth import Actor, actor_auth

router = APIRouter(prefix="/admin/users", tags=["admin", "users"])


class SanctionIn(BaseModel):
    """Input model for sanctioning a user."""

    type: str  # warning|temporary_ban|permanent_ban
    reason: str = ""
    description: str | None = None
    duration: int | str | None = None  # hours, temporary bans only


class UserUpdateIn(BaseModel):
    """Input model for an admin user edit."""

    role: str | None = None
    is_active: bool | None = None
    domain: str | None = None
    xp: int | None = None


@router.get("")
async def users(
    search: str | None = None,
    domain: str | None = None,
    role: str | None = None,
    is_active: bool | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 20,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """
    List users for the admin back office.

    search matches username or email; sort_by is one of created_at,
    updated_at, username, xp, level.
    """
    filters = UserFilter(
        search=search or None,
        domain=domain,
        role=role,
        is_active=is_active,
        sort_by=sort_by,
        sort_order=sort_order.lower(),
    )
    rows, pagination = await list_users(db, actor, filters, Page.of(page, limit))
    data = [dict(UserOut.model_validate(user).model_dump(mode="json"), post_count=count) for user, count in rows]
    return ok(data, pagination=pagination)


@router.get("/{user_id}")
async def user_detail(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """Get a user with level progress, moderation counters and sanction history."""
    detail = await get_user(db, actor, user_id)
    data = UserOut.model_validate(detail.user).model_dump(mode="json")
    data["progress"] = xp_progress(detail.user.xp).to_dict()
    data["stats"] = detail.stats.to_dict()
    data["sanctions"] = [SanctionOut.build(s, name).model_dump(mode="json") for s, name in detail.sanctions]
    return ok(data)


@router.put("/{user_id}")
async def edit_user(
    user_id: uuid.UUID,
    body: UserUpdateIn,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """Update role, status, domain or XP of a user."""
    user = await update_user(db, actor, user_id, UserUpdate(**body.model_dump()))
    return ok(UserOut.model_validate(user).model_dump(mode="json"))


@router.get("/{user_id}/sanctions")
async def sanctions(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """Get user sanctions, newest first."""
    rows = await list_sanctions(db, actor, user_id)
    return ok([SanctionOut.build(s, name).model_dump(mode="json") for s, name in rows])


@router.post("/{user_id}/sanctions", status_code=201)
async def sanction_user(
    user_id: uuid.UUID,
    body: SanctionIn,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(actor_auth),
) -> dict[str, Any]:
    """Create a warning or ban for a user."""
    sanction = await create_sanction(
        db,
        actor,
        user_id,
        type=body.type,
        reason=body.reason,
        description=body.description,
        duration_hours=body.duration,
    )
    return ok(SanctionOut.build(sanction).model_dump(mode="json"))
