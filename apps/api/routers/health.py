"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.deps import get_db
from models.safety import Report

router = APIRouter()


@router.get("/")
async def health_check() -> dict[str, str]:
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/db")
async def health_check_db(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Database health check, reporting the moderation queue depth."""
    try:
        pending = await db.scalar(select(func.count()).select_from(Report).where(Report.status == "pending"))
        return {"status": "healthy", "database": "connected", "pending_reports": pending}
    except SQLAlchemyError as e:
        return {"status": "unhealthy", "database": "disconnected", "error": str(e)}
