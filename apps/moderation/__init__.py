"""Moderation & sanction workflow."""

from apps.moderation.reports import get_report, list_reports
from apps.moderation.resolution import REPORT_ACTIONS, ResolutionResult, resolve_report
from apps.moderation.sanctions import SANCTION_TYPES, SanctionRequest, apply_sanction, create_sanction, list_sanctions
from apps.moderation.users import UserDetail, UserStats, UserUpdate, get_user, list_users, update_user

__all__ = [
    "REPORT_ACTIONS",
    "SANCTION_TYPES",
    "ResolutionResult",
    "SanctionRequest",
    "UserDetail",
    "UserStats",
    "UserUpdate",
    "apply_sanction",
    "create_sanction",
    "get_report",
    "get_user",
    "list_reports",
    "list_sanctions",
    "list_users",
    "resolve_report",
    "update_user",
]
