"""Recording of approve/reject decisions."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from litestar_approvals.core.arguments import DecisionArguments
from litestar_approvals.core.context import format_timestamp
from litestar_approvals.core.types import ContextKey, WorkflowRoute
from litestar_approvals.exceptions import DecisionRecordingError, InvalidDecisionError
from litestar_approvals.steps.base import BaseProcessStep

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_approvals.config import ApprovalConfig
    from litestar_approvals.core import ContentStore, WorkflowContext

__all__ = ["DecisionRecorder", "format_decision_entry"]

logger = logging.getLogger(__name__)

UNKNOWN_STEP_TITLE = "Unknown Step"

_LINE_BREAKS = re.compile(r"[\r\n]+")

_DECISION_LABELS = {WorkflowRoute.APPROVE.value: "APPROVED", WorkflowRoute.REJECT.value: "REJECTED"}


def format_decision_entry(moment: datetime, step_title: str, decision: str, approver: str, comments: str = "") -> str:
    """Build one approval history line.

    Recognised decisions are written in past tense (``APPROVED``, ``REJECTED``);
    anything else is written upper-cased as submitted.

    Example:
        >>> format_decision_entry(datetime(2024, 5, 1, 9, 30), "Initial Review", "approve", "jdoe", "ok")
        '[2024-05-01 09:30:00] Initial Review: APPROVED by jdoe - ok'
    """
    comments = _LINE_BREAKS.sub(" ", comments)
    label = _DECISION_LABELS.get(decision.lower(), decision.upper())
    suffix = f" - {comments}" if comments else ""
    return f"[{format_timestamp(moment)}] {step_title}: {label} by {approver}{suffix}"


class DecisionRecorder(BaseProcessStep):
    """Record an approver's decision and set the workflow route.

    Unlike routing, a broken decision must never be swallowed: every failure
    surfaces as :class:`DecisionRecordingError` so the runtime retries the step
    or asks for intervention.

    Attributes:
        content_store: Optional store the decision is stamped onto.
        strict: Reject decisions that are neither approve nor reject.
    """

    def __init__(
        self,
        name: str = "decision_recorder",
        description: str = "Records approval decisions in the audit history",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        content_store: ContentStore | None = None,
        strict: bool | None = None,
    ) -> None:
        super().__init__(name, description, config=config, clock=clock)
        self.content_store = content_store
        self.strict = self.config.strict_decisions if strict is None else strict

    async def record(
        self,
        context: WorkflowContext,
        arguments: str | DecisionArguments | None,
        approver: str | None = None,
        *,
        step_title: str | None = None,
        invocation_id: str | None = None,
    ) -> None:
        """Record a decision.

        Appends one line to ``approvalHistory``, overwrites the ``last*`` fields and
        sets ``workflowRoute``. A reject also stores the comments as ``rejectionReason``.

        Args:
            context: The workflow context.
            arguments: ``DECISION:<approve|reject>,COMMENTS:<text>`` or parsed arguments.
            approver: Identity of the approver. Defaults to the workflow initiator.
            step_title: Title written to the history. Defaults to the current step.
            invocation_id: Optional identifier of this step invocation. A replay of
                an applied invocation records nothing.

        Raises:
            InvalidDecisionError: In strict mode, for an unrecognised decision.
            DecisionRecordingError: If the decision could not be recorded.
        """
        if context.has_applied(invocation_id):
            logger.info("Decision invocation %s already recorded, skipping", invocation_id)
            return

        if not isinstance(arguments, DecisionArguments):
            arguments = DecisionArguments.from_process_args(arguments)

        approver = approver or context.initiator
        if not approver:
            msg = "No approver identity available"
            raise DecisionRecordingError(msg)

        if not arguments.is_recognized:
            if self.strict:
                raise InvalidDecisionError(arguments.decision, approver)
            logger.warning("Unrecognised decision %r by %s, taking the approve route", arguments.decision, approver)

        try:
            now = self.clock()
            if self.content_store is not None:
                await self._stamp_content(context.payload, arguments, approver, now)

            entry = format_decision_entry(
                now,
                self._resolve_step_title(context, step_title),
                arguments.decision,
                approver,
                arguments.comments,
            )
            context.append_history(entry)
            context.set(ContextKey.LAST_APPROVER, approver)
            context.set(ContextKey.LAST_DECISION, arguments.decision)
            context.set(ContextKey.LAST_DECISION_TIME, now)

            if arguments.is_reject:
                context.set(ContextKey.WORKFLOW_ROUTE, WorkflowRoute.REJECT.value)
                context.set(ContextKey.REJECTION_REASON, arguments.comments)
                logger.info("Content rejected by %s - routing to revision", approver)
            else:
                context.set(ContextKey.WORKFLOW_ROUTE, WorkflowRoute.APPROVE.value)
                logger.info("Content approved by %s - proceeding to next level", approver)

            context.mark_applied(invocation_id)
            logger.debug("Recorded approval: %s", entry)
        except Exception as e:
            logger.exception("Failed to record approval decision")
            msg = "Decision recording failed"
            raise DecisionRecordingError(msg, approver=approver, cause=e) from e

    def _resolve_step_title(self, context: WorkflowContext, step_title: str | None) -> str:
        title = step_title or context.current_step
        if not title:
            logger.warning("Could not get step title for workflow %s", context.instance_id)
            return UNKNOWN_STEP_TITLE
        return title

    async def _stamp_content(
        self,
        path: str,
        arguments: DecisionArguments,
        approver: str,
        moment: datetime,
    ) -> None:
        resource = await self.content_store.get(path)  # type: ignore[union-attr]
        if resource is None:
            logger.warning("Content not found at %s, decision not stamped", path)
            return
        properties = await self.content_store.get_mutable_properties(resource)  # type: ignore[union-attr]
        if properties is None:
            logger.warning("Content at %s has no writable properties, decision not stamped", path)
            return
        properties[ContextKey.LAST_APPROVER.value] = approver
        properties[ContextKey.LAST_DECISION.value] = arguments.decision
        properties[ContextKey.LAST_DECISION_TIME.value] = moment.isoformat()
        await self.content_store.commit()  # type: ignore[union-attr]

