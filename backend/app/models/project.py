"""
Project model — one portfolio item.

Design notes:
  • title, description and details are enforced by the database itself
    (NOT NULL + non-empty CHECK), so a record missing any of them can
    never be persisted.
  • tech_stack is JSON (JSONB on Postgres) holding an ordered list of tags.
  • Records are write-once: the service never updates or deletes them.
  • created_at is indexed — the listing is always ordered by it.
"""

import datetime
import uuid

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Project(Base):
    """One portfolio item, optionally with a cover image."""

    __tablename__ = "projects"

    # ── Primary key ─────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Required text ───────────────────────────────────────
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Cover image ─────────────────────────────────────────
    # url: absolute, external or derived from the upload
    # path: relative storage path, only set for uploads
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_path: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Optional extras ─────────────────────────────────────
    live_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[str | None] = mapped_column(Text, nullable=True)
    tech_stack: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    # ── Table-level constraints ─────────────────────────────
    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_projects_title_not_empty"),
        CheckConstraint(
            "length(description) > 0", name="ck_projects_description_not_empty"
        ),
        CheckConstraint("length(details) > 0", name="ck_projects_details_not_empty"),
        Index("ix_projects_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Project id={self.id!s:.8} title={self.title!r}>"
