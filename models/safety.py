"""Safety & Moderation models - reports, sanctions and moderation actions."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from core.db import Base, utcnow


class Report(Base):
    """User-generated report (complaint) about a post or comment."""

    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)  # post|comment
    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reason: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")  # pending|dismissed|resolved
    resolved_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("content_type IN ('post','comment')", name="chk_report_content_type"),
        CheckConstraint("status IN ('pending','dismissed','resolved')", name="chk_report_status"),
        # Resolver fields are set exactly when the report leaves pending
        CheckConstraint(
            "(status = 'pending') = (resolved_by IS NULL AND resolved_at IS NULL)",
            name="chk_report_resolution",
        ),
        # Index for the moderation queue
        Index("idx_reports_pending", "created_at", postgresql_where=text("status = 'pending'")),
    )

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, {self.content_type}={self.content_id}, status={self.status})>"


class Sanction(Base):
    """Disciplinary record applied to a user. Never updated or deleted."""

    __tablename__ = "user_sanctions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    moderator_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(24), nullable=False)  # warning|temporary_ban|permanent_ban
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("type IN ('warning','temporary_ban','permanent_ban')", name="chk_sanction_type"),
        CheckConstraint("(type = 'temporary_ban') = (expires_at IS NOT NULL)", name="chk_sanction_expiry"),
        CheckConstraint("user_id <> moderator_id", name="chk_sanction_no_self"),
    )

    def __repr__(self) -> str:
        return f"<Sanction(id={self.id}, user={self.user_id}, type={self.type})>"


class ModerationAction(Base):
    """Append-only audit row written by every admin mutation."""

    __tablename__ = "moderation_actions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    moderator_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)  # post|comment|user
    content_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    action: Mapped[str] = mapped_column(String(24), nullable=False)  # delete|warn|ban|update|<sanction type>
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[dict[str, Any] | None] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (Index("idx_moderation_content", "content_type", "content_id"),)

    def __repr__(self) -> str:
        return f"<ModerationAction(id={self.id}, {self.content_type}={self.content_id}, action={self.action})>"
