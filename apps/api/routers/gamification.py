"""Gamification level endpoints."""

from typing import Any

from fastapi import APIRouter, Query

from apps.api.schemas import ok
from apps.gamification.levels import xp_progress

router = APIRouter(prefix="/gamification", tags=["gamification"])


@router.get("/level")
async def level(xp: int = Query(ge=0)) -> dict[str, Any]:
    """Level and progress for an XP total."""
    return ok(xp_progress(xp).to_dict())
