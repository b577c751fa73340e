"""
Pydantic v2 schemas for projects.

Separation:
  • ProjectSubmission — what the CLIENT sends (every field optional).
  • ProjectOut        — what the SERVER returns after persistence.

The wire format is camelCase (coverImageUrl, techStack, createdAt, ...).

ProjectSubmission is deliberately permissive: unknown keys are ignored,
numbers sent for text fields are kept as their string form, and nothing
is marked required here — the database is the authority on required
fields, so a missing title surfaces as a persistence failure.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ── Request schema ──────────────────────────────────────────
class ProjectSubmission(BaseModel):
    """Fields accepted by POST /api/projects/create."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    title: str | None = None
    description: str | None = None
    details: str | None = None
    cover_image_url: str | None = Field(
        default=None,
        description="External image URL; ignored when a file is uploaded.",
    )
    live_link: str | None = None
    price: str | None = None
    tech_stack: list[str] = Field(default_factory=list)

    @field_validator("tech_stack", mode="before")
    @classmethod
    def listify_tech_stack(cls, v: Any) -> Any:
        """A bare value becomes a one-tag list; tags are kept as strings."""
        if v is None:
            return []
        if isinstance(v, (str, int, float)):
            v = [v]
        if isinstance(v, list):
            return [str(tag) for tag in v]
        return v


# ── Response schemas ────────────────────────────────────────
class ProjectOut(BaseModel):
    """Full record as stored, including server-assigned id and timestamp."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: uuid.UUID
    title: str
    cover_image_url: str | None = None
    cover_image_path: str | None = None
    live_link: str | None = None
    description: str
    tech_stack: list[str] = Field(default_factory=list)
    price: str | None = None
    details: str
    created_at: datetime.datetime


class ProjectCreatedOut(BaseModel):
    """Envelope returned with 201 Created."""

    message: str
    project: ProjectOut
