"""Content store implementations for litestar-approvals.

The SQLAlchemy-backed store lives in :mod:`litestar_approvals.db` and requires
the [db] extra.
"""

from __future__ import annotations

from litestar_approvals.store.memory import ContentItem, InMemoryContentStore

__all__ = ["ContentItem", "InMemoryContentStore"]
