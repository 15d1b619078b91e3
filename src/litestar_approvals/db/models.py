"""SQLAlchemy models for content store persistence.

This module defines the database model backing the SQLAlchemy content store:
- ContentItemModel: A content item and its key/value properties
"""

from __future__ import annotations

from typing import Any

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import Mapped, mapped_column

__all__ = ["ContentItemModel"]


# Cross-database JSON type: uses JSONB for PostgreSQL, JSON for others (SQLite, MySQL, etc.)
JSONType = JSON().with_variant(JSONB, "postgresql")


class ContentItemModel(UUIDAuditBase):
    """Persisted content item.

    Properties are stored as a mutable JSON document, so in-place edits made
    through the content store are flushed on commit.

    Attributes:
        path: Unique hierarchical location of the item.
        resource_type: Kind of item, e.g. ``"page"`` or ``"asset"``.
        properties: Key/value properties of the item.
    """

    __tablename__ = "content_items"

    path: Mapped[str] = mapped_column(String(1024), unique=True, index=True)
    resource_type: Mapped[str] = mapped_column(String(50), default="page")
    properties: Mapped[dict[str, Any]] = mapped_column(MutableDict.as_mutable(JSONType), default=dict)
