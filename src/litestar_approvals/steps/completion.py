"""Finalization of approval workflows that reached their End state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from litestar_approvals.core.types import ContextKey, WorkflowOutcome, WorkflowRoute
from litestar_approvals.exceptions import ContentStoreError
from litestar_approvals.steps.base import BaseProcessStep

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_approvals.config import ApprovalConfig
    from litestar_approvals.core import ContentStore, WorkflowContext

__all__ = ["CompletionFinalizer", "build_completion_notification"]

logger = logging.getLogger(__name__)


def build_completion_notification(payload: str, *, approved: bool, escalated: bool, history: str) -> str:
    """Compose the completion summary handed to the notification service."""
    return (
        "Workflow Completed\n"
        "==================\n"
        f"Content: {payload}\n"
        f"Outcome: {'APPROVED' if approved else 'REJECTED'}\n"
        f"Escalated: {'Yes' if escalated else 'No'}\n"
        f"\nApproval History:\n{history}"
    )


class CompletionFinalizer(BaseProcessStep):
    """Summarize the outcome of a finished workflow.

    The finalizer only prepares the notification payload; delivering it is left
    to whoever reads ``completionNotification``. It writes its fields once, so a
    retried invocation leaves an already finalized context untouched.
    """

    def __init__(
        self,
        name: str = "completion_finalizer",
        description: str = "Prepares the completion summary of an approval workflow",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        content_store: ContentStore | None = None,
    ) -> None:
        super().__init__(name, description, config=config, clock=clock)
        self.content_store = content_store

    async def finalize(self, context: WorkflowContext, payload: str | None = None) -> str:
        """Write the outcome fields and the completion notification.

        Args:
            context: The workflow context.
            payload: Content identifier for the summary. Defaults to the context payload.

        Returns:
            The completion notification text.
        """
        if context.get(ContextKey.WORKFLOW_COMPLETED, False) is True:
            logger.debug("Workflow %s already finalized", context.instance_id)
            return context.get(ContextKey.COMPLETION_NOTIFICATION, "")

        if payload is None:
            payload = context.payload

        history = context.get(ContextKey.APPROVAL_HISTORY) or "No history available"
        escalated = context.get(ContextKey.ESCALATED, False) is True
        last_decision = str(context.get(ContextKey.LAST_DECISION, "unknown"))
        approved = last_decision.lower() == WorkflowRoute.APPROVE
        outcome = WorkflowOutcome.APPROVED if approved else WorkflowOutcome.REJECTED

        logger.info(
            "Workflow completed for %s: outcome=%s, escalated=%s",
            payload,
            outcome.upper(),
            escalated,
        )

        notification = build_completion_notification(payload, approved=approved, escalated=escalated, history=history)
        now = self.clock()
        context.set(ContextKey.COMPLETION_NOTIFICATION, notification)
        context.set(ContextKey.WORKFLOW_COMPLETED, True)
        context.set(ContextKey.WORKFLOW_COMPLETED_TIME, now)
        context.set(ContextKey.WORKFLOW_OUTCOME, outcome.value)

        if self.content_store is not None:
            await self._stamp_content(payload, outcome, now)

        logger.debug("Completion notification prepared for: %s", context.initiator)
        return notification

    async def _stamp_content(self, path: str, outcome: WorkflowOutcome, moment: datetime) -> None:
        try:
            resource = await self.content_store.get(path)  # type: ignore[union-attr]
            if resource is None:
                logger.warning("Content not found at %s, outcome not stamped", path)
                return
            properties = await self.content_store.get_mutable_properties(resource)  # type: ignore[union-attr]
            if properties is None:
                logger.warning("Content at %s has no writable properties, outcome not stamped", path)
                return
            properties["approvalStatus"] = outcome.value
            properties[ContextKey.WORKFLOW_COMPLETED_TIME.value] = moment.isoformat()
            await self.content_store.commit()  # type: ignore[union-attr]
        except ContentStoreError:
            logger.exception("Failed to stamp outcome for %s", path)

    async def execute(self, context: WorkflowContext) -> str:
        return await self.finalize(context)
