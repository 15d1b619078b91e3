"""Database persistence layer for litestar-approvals.

This module provides the SQLAlchemy model, repository and content store used
to keep content item properties in a relational database.

Requires the [db] extra:
    pip install litestar-approvals[db]
"""

from __future__ import annotations

from litestar_approvals.db.models import ContentItemModel
from litestar_approvals.db.repositories import ContentItemRepository
from litestar_approvals.db.store import SQLAlchemyContentStore

__all__ = [
    "ContentItemModel",
    "ContentItemRepository",
    "SQLAlchemyContentStore",
]
