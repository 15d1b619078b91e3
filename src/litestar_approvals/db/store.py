"""Content store backed by an async SQLAlchemy session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from litestar_approvals.db.repositories import ContentItemRepository
from litestar_approvals.exceptions import ContentStoreError

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from sqlalchemy.ext.asyncio import AsyncSession

    from litestar_approvals.db.models import ContentItemModel

__all__ = ["SQLAlchemyContentStore"]

logger = logging.getLogger(__name__)


class SQLAlchemyContentStore:
    """ContentStore implementation persisting items through advanced-alchemy.

    Property edits are tracked by the session and written on :meth:`commit`.

    Example:
        >>> async with session_maker() as session:
        ...     store = SQLAlchemyContentStore(session)
        ...     recorder = DecisionRecorder(content_store=store)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the store.

        Args:
            session: The async session to read and write through.
        """
        self.session = session
        self.repository = ContentItemRepository(session=session)

    async def get(self, path: str) -> ContentItemModel | None:
        """Fetch the content item at ``path``.

        Raises:
            ContentStoreError: If the lookup fails.
        """
        try:
            return await self.repository.get_by_path(path)
        except SQLAlchemyError as e:
            msg = f"Failed to load content: {e}"
            raise ContentStoreError(msg, path=path) from e

    async def get_mutable_properties(self, resource: ContentItemModel) -> MutableMapping[str, Any] | None:
        if resource.properties is None:
            resource.properties = {}
        return resource.properties

    async def commit(self) -> None:
        """Commit the session.

        Raises:
            ContentStoreError: If the commit fails. The session is rolled back.
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            msg = f"Failed to commit content changes: {e}"
            raise ContentStoreError(msg) from e
