"""Escalation of approval levels that stalled past their timeout.

Escalation is a business-level trigger: the monitor never cancels the pending
level, it only annotates the context and picks an escalation target for the
runtime and approvers to act on.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from litestar_approvals.core.arguments import EscalationArguments
from litestar_approvals.core.context import format_timestamp
from litestar_approvals.core.types import ContextKey, EscalationState
from litestar_approvals.steps.base import BaseProcessStep

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar_approvals.config import ApprovalConfig
    from litestar_approvals.core import WorkflowContext

__all__ = ["EscalationMonitor", "escalation_state"]

logger = logging.getLogger(__name__)


def escalation_state(context: WorkflowContext) -> EscalationState:
    """Read the escalation state of the level currently tracked in ``context``."""
    if context.get(ContextKey.ESCALATED, False) is True:
        return EscalationState.ESCALATED
    if context.get(ContextKey.CURRENT_STEP_START_TIME) is None:
        return EscalationState.NOT_TRACKED
    return EscalationState.TRACKED_PENDING


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class EscalationMonitor(BaseProcessStep):
    """Escalate a level that stayed pending longer than its threshold.

    Polling is idempotent: the first poll of a level only starts tracking, and
    once ``escalated`` is set every further poll is a no-op. The monitor never
    fails the step; a fault is logged and treated as "no escalation this poll".

    Example:
        >>> monitor = EscalationMonitor(arguments="THRESHOLD_HOURS:24")
        >>> await monitor.check(context)
        <EscalationState.TRACKED_PENDING: 'tracked_pending'>
    """

    def __init__(
        self,
        name: str = "escalation_monitor",
        description: str = "Escalates approval levels pending past their threshold",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        arguments: str | EscalationArguments | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            name: Unique identifier for the step.
            description: Human-readable description.
            config: Approval configuration providing the default threshold.
            clock: Callable returning the current time.
            arguments: Step-level ``THRESHOLD_HOURS:<int>`` override, used when a
                poll does not supply its own.
        """
        super().__init__(name, description, config=config, clock=clock)
        self.arguments = arguments

    async def check(
        self,
        context: WorkflowContext,
        arguments: str | EscalationArguments | None = None,
    ) -> EscalationState:
        """Poll the level tracked in ``context``.

        Args:
            context: The workflow context.
            arguments: Optional ``THRESHOLD_HOURS:<int>`` override for this poll.

        Returns:
            The escalation state after the poll.
        """
        snapshot = context.snapshot()
        try:
            return self._check(context, arguments if arguments is not None else self.arguments)
        except Exception:
            context.restore(snapshot)
            logger.exception("Escalation check failed for workflow %s, not escalating", context.instance_id)
            return escalation_state(context)

    def _check(self, context: WorkflowContext, arguments: str | EscalationArguments | None) -> EscalationState:
        if not isinstance(arguments, EscalationArguments):
            arguments = EscalationArguments.from_process_args(arguments)
        threshold_hours = arguments.resolve(self.config.default_threshold_hours)
        now = self.clock()

        started_at = context.get(ContextKey.CURRENT_STEP_START_TIME)
        if started_at is None:
            context.set(ContextKey.CURRENT_STEP_START_TIME, now)
            if ContextKey.ESCALATED not in context.data:
                context.set(ContextKey.ESCALATED, False)
            logger.debug("Initialized escalation tracking for workflow: %s", context.instance_id)
            return escalation_state(context)

        hours_elapsed = (_as_datetime(now) - _as_datetime(started_at)) // timedelta(hours=1)
        if hours_elapsed < threshold_hours or context.get(ContextKey.ESCALATED, False) is True:
            logger.debug(
                "No escalation needed - %d hours elapsed of %d hour threshold",
                hours_elapsed,
                threshold_hours,
            )
            return escalation_state(context)

        logger.warning(
            "Workflow %s exceeded %d hour threshold (elapsed: %d hours), escalating",
            context.instance_id,
            threshold_hours,
            hours_elapsed,
        )
        level = int(context.get(ContextKey.CURRENT_STEP_LEVEL, 1))
        target = self.config.escalation_target(level)
        entry = f"[{format_timestamp(now)}] ESCALATION: Timeout after {hours_elapsed} hours"

        context.set(ContextKey.ESCALATED, True)
        context.set(ContextKey.ESCALATION_TIME, now)
        context.set(
            ContextKey.ESCALATION_REASON,
            f"Approval timeout: {hours_elapsed} hours exceeded threshold of {threshold_hours} hours",
        )
        context.set(ContextKey.ESCALATION_TARGET, target)
        context.append_history(entry)

        logger.info("Escalation to %s recorded for workflow: %s", target, context.instance_id)
        return EscalationState.ESCALATED

    async def execute(self, context: WorkflowContext) -> EscalationState:
        return await self.check(context)
