"""Asset processing step backed by a content store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from litestar_approvals.core.types import ContextKey
from litestar_approvals.exceptions import ContentStoreError
from litestar_approvals.steps.base import BaseProcessStep

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_approvals.config import ApprovalConfig
    from litestar_approvals.core import ContentStore, WorkflowContext

__all__ = ["ASSET_RESOURCE_TYPE", "AssetMetadataStep"]

logger = logging.getLogger(__name__)

ASSET_RESOURCE_TYPE = "asset"


class AssetMetadataStep(BaseProcessStep):
    """Stamp processing metadata onto the asset a workflow runs for.

    Missing content, or content that is not an asset, is nothing to do: the
    step logs it and returns normally. A store failure is logged and not retried.

    Example:
        >>> step = AssetMetadataStep(content_store=store)
        >>> await step.execute(context)
        True
    """

    def __init__(
        self,
        content_store: ContentStore,
        name: str = "asset_metadata",
        description: str = "Stamps processing metadata onto DAM assets",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        resource_type: str = ASSET_RESOURCE_TYPE,
    ) -> None:
        super().__init__(name, description, config=config, clock=clock)
        self.content_store = content_store
        self.resource_type = resource_type

    async def execute(self, context: WorkflowContext) -> bool:
        """Process the asset at the context payload.

        Returns:
            True if the asset metadata was committed, False otherwise.
        """
        path = context.payload
        logger.info("Processing asset: %s", path)

        try:
            resource = await self.content_store.get(path)
            if resource is None:
                logger.warning("Asset resource not found: %s", path)
                return False
            if resource.resource_type != self.resource_type:
                logger.warning("Resource is not a DAM asset: %s", path)
                return False
            properties = await self.content_store.get_mutable_properties(resource)
        except ContentStoreError:
            logger.exception("Failed to load asset: %s", path)
            return False

        if properties is None:
            logger.warning("Metadata not writable for asset: %s", path)
            return False

        now = self.clock()
        properties["processed"] = True
        properties["processedAt"] = now.isoformat()
        properties["processor"] = type(self).__name__
        try:
            await self.content_store.commit()
        except ContentStoreError:
            logger.exception("Failed to commit metadata changes for %s", path)
            return False

        context.set(ContextKey.ASSET_PROCESSED, path)
        context.set(ContextKey.PROCESSED_AT, now)
        logger.info("Asset processing completed: %s", path)
        return True
