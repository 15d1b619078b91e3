"""In-memory content store.

Suitable for development, testing and single-process deployments. Property
edits are staged per item and only become visible on :meth:`commit`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from litestar_approvals.exceptions import ContentStoreError

__all__ = ["ContentItem", "InMemoryContentStore"]

logger = logging.getLogger(__name__)


@dataclass
class ContentItem:
    """A content item held in memory.

    Attributes:
        path: Hierarchical location of the item.
        resource_type: Kind of item, e.g. ``"page"`` or ``"asset"``.
        properties: Committed key/value properties.
    """

    path: str
    resource_type: str = "page"
    properties: dict[str, Any] = field(default_factory=dict)


class InMemoryContentStore:
    """Dict-backed implementation of the ContentStore protocol.

    Attributes:
        fail_next_commit: When set, the next commit raises ContentStoreError.
        commit_count: Number of successful commits.

    Example:
        >>> store = InMemoryContentStore()
        >>> store.add("/content/dam/site/logo.png", resource_type="asset")
        >>> item = await store.get("/content/dam/site/logo.png")
        >>> properties = await store.get_mutable_properties(item)
        >>> properties["dc:title"] = "Logo"
        >>> await store.commit()
    """

    def __init__(self) -> None:
        self._items: dict[str, ContentItem] = {}
        self._staged: dict[str, dict[str, Any]] = {}
        self.fail_next_commit = False
        self.commit_count = 0

    def add(self, path: str, resource_type: str = "page", properties: dict[str, Any] | None = None) -> ContentItem:
        """Create or replace a content item."""
        item = ContentItem(path=path, resource_type=resource_type, properties=dict(properties or {}))
        self._items[path] = item
        return item

    async def get(self, path: str) -> ContentItem | None:
        return self._items.get(path)

    async def get_mutable_properties(self, resource: ContentItem) -> dict[str, Any] | None:
        if resource.path not in self._items:
            return None
        if resource.path not in self._staged:
            self._staged[resource.path] = copy.deepcopy(self._items[resource.path].properties)
        return self._staged[resource.path]

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._staged)

    async def commit(self) -> None:
        """Apply all staged property edits.

        Raises:
            ContentStoreError: If a failure was injected with ``fail_next_commit``.
        """
        if self.fail_next_commit:
            self.fail_next_commit = False
            msg = "Commit failed"
            raise ContentStoreError(msg, path=next(iter(self._staged), None))
        for path, properties in self._staged.items():
            self._items[path].properties = properties
        logger.debug("Committed %d staged item(s)", len(self._staged))
        self._staged.clear()
        self.commit_count += 1

    async def revert(self) -> None:
        """Discard all staged property edits."""
        self._staged.clear()
