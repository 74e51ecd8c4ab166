"""Typed filter specs for admin list endpoints."""

import math
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, or_

from core.errors import ValidationFailed
from models.safety import Report
from models.user import User

REPORT_STATUSES = ("pending", "dismissed", "resolved")
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20

# Sort keys accepted from query strings; anything else is rejected, never interpolated.
USER_SORT_COLUMNS = {
    "created_at": User.created_at,
    "updated_at": User.updated_at,
    "username": User.username,
    "xp": User.xp,
    "level": User.level,
}
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ReportFilter:
    """
    Optional equality conditions over the reports table.

    A None field adds no condition. Values are always bound as parameters.
    """

    status: str | None = "pending"
    content_type: str | None = None
    reason: str | None = None
    reporter_id: uuid.UUID | None = None

    def __post_init__(self) -> None:
        if self.status is not None and self.status not in REPORT_STATUSES:
            raise ValidationFailed(f"Invalid status filter: {self.status}")

    def predicates(self) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if self.status is not None:
            conditions.append(Report.status == self.status)
        if self.content_type is not None:
            conditions.append(Report.content_type == self.content_type)
        if self.reason is not None:
            conditions.append(Report.reason == self.reason)
        if self.reporter_id is not None:
            conditions.append(Report.reporter_id == self.reporter_id)
        return conditions


@dataclass(frozen=True)
class UserFilter:
    """
    Search, equality filters and ordering for the admin user list.

    search matches a substring of username or email, case-insensitively.
    """

    search: str | None = None
    domain: str | None = None
    role: str | None = None
    is_active: bool | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"

    def __post_init__(self) -> None:
        if self.sort_by not in USER_SORT_COLUMNS:
            raise ValidationFailed(f"Invalid sort column: {self.sort_by}")
        if self.sort_order not in SORT_ORDERS:
            raise ValidationFailed(f"Invalid sort order: {self.sort_order}")

    def predicates(self) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if self.search:
            pattern = f"%{_escape_like(self.search)}%"
            conditions.append(or_(User.username.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\")))
        if self.domain is not None:
            conditions.append(User.domain == self.domain)
        if self.role is not None:
            conditions.append(User.role == self.role)
        if self.is_active is not None:
            conditions.append(User.is_active.is_(self.is_active))
        return conditions

    def ordering(self) -> list[ColumnElement[Any]]:
        column = USER_SORT_COLUMNS[self.sort_by]
        primary = column.asc() if self.sort_order == "asc" else column.desc()
        return [primary, User.id.asc()]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class Page:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def of(cls, page: int | None, limit: int | None) -> "Page":
        """Normalize raw query values: page >= 1, 1 <= limit <= 100. None picks the default."""
        return cls(
            page=max(page if page is not None else 1, 1),
            limit=min(max(limit if limit is not None else DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def describe(self, total: int) -> dict[str, Any]:
        total_pages = math.ceil(total / self.limit)
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_pages": total_pages,
            "has_next": self.page < total_pages,
            "has_prev": self.page > 1,
        }
