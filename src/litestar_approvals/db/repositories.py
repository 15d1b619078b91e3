"""Repository implementations for content store persistence.

This module provides async repositories for content items using
advanced-alchemy's repository pattern.
"""

from __future__ import annotations

from advanced_alchemy.repository import SQLAlchemyAsyncRepository
from sqlalchemy import select

from litestar_approvals.db.models import ContentItemModel

__all__ = ["ContentItemRepository"]


class ContentItemRepository(SQLAlchemyAsyncRepository[ContentItemModel]):
    """Repository for content item CRUD operations."""

    model_type = ContentItemModel

    async def get_by_path(self, path: str) -> ContentItemModel | None:
        """Get a content item by its path.

        Args:
            path: The content path.

        Returns:
            The content item or None if not found.
        """
        stmt = select(ContentItemModel).where(ContentItemModel.path == path)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
