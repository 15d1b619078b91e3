"""Data Transfer Objects for the approval web API.

This module defines DTOs for serializing and deserializing approval workflow
data in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from litestar_approvals.core.types import ContextKey

if TYPE_CHECKING:
    from litestar_approvals.core.models import WorkflowInstanceData

__all__ = [
    "ApprovalInstanceDTO",
    "ApprovalInstanceDetailDTO",
    "DecisionDTO",
    "StartApprovalDTO",
    "StepExecutionDTO",
    "TerminateDTO",
]


@dataclass
class StartApprovalDTO:
    """DTO for starting a new approval workflow.

    Attributes:
        payload: Location of the content item to approve.
        initiator: Optional user starting the workflow.
        metadata: Optional metadata stored on the workflow context.
    """

    payload: str
    initiator: str | None = None
    metadata: dict[str, Any] | None = None


@dataclass
class DecisionDTO:
    """DTO for submitting an approval decision.

    Attributes:
        approver: Identity of the approver.
        decision: ``approve`` or ``reject``.
        comments: Optional comments.
        invocation_id: Optional idempotency key; resubmissions are ignored.
    """

    approver: str
    decision: str
    comments: str = ""
    invocation_id: str | None = None


@dataclass
class TerminateDTO:
    """DTO for terminating a workflow.

    Attributes:
        reason: Explanation for the termination.
    """

    reason: str


@dataclass
class StepExecutionDTO:
    """DTO for a runtime step execution record."""

    step_name: str
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    attempts: int = 1
    error: str | None = None


@dataclass
class ApprovalInstanceDTO:
    """DTO for approval workflow summary.

    Attributes:
        id: Instance ID.
        payload: Content location under approval.
        status: Current status.
        current_step: Title of the step the instance is at.
        assignee_group: Approver group the pending level is assigned to.
        approval_level: Level the next routing will process.
        escalated: Whether the workflow was escalated.
        escalation_target: Group the workflow escalated to, if any.
        outcome: Final outcome once completed.
        started_at: When the workflow started.
        completed_at: When the workflow finished.
        error: Error of the last failed step, or the termination reason.
    """

    id: UUID
    payload: str
    status: str
    current_step: str | None
    assignee_group: str | None
    approval_level: int
    escalated: bool
    escalation_target: str | None
    outcome: str | None
    started_at: datetime
    completed_at: datetime | None = None
    error: str | None = None

    @classmethod
    def from_instance(cls, instance: WorkflowInstanceData) -> ApprovalInstanceDTO:
        context = instance.context
        return cls(
            id=instance.id,
            payload=instance.payload,
            status=instance.status.value,
            current_step=instance.current_step,
            assignee_group=instance.assignee_group,
            approval_level=int(context.get(ContextKey.APPROVAL_LEVEL, 1)),
            escalated=context.get(ContextKey.ESCALATED, False) is True,
            escalation_target=context.get(ContextKey.ESCALATION_TARGET),
            outcome=context.get(ContextKey.WORKFLOW_OUTCOME),
            started_at=instance.started_at,
            completed_at=instance.completed_at,
            error=instance.error,
        )


@dataclass
class ApprovalInstanceDetailDTO(ApprovalInstanceDTO):
    """DTO for detailed approval workflow information.

    Attributes:
        history: Approval history lines, oldest first.
        last_approver: Approver of the most recent decision.
        last_decision: Most recent decision.
        rejection_reason: Comments of the rejecting decision, if rejected.
        completion_notification: Prepared completion summary, once completed.
        step_history: Runtime step executions.
    """

    history: list[str] = field(default_factory=list)
    last_approver: str | None = None
    last_decision: str | None = None
    rejection_reason: str | None = None
    completion_notification: str | None = None
    step_history: list[StepExecutionDTO] = field(default_factory=list)

    @classmethod
    def from_instance(cls, instance: WorkflowInstanceData) -> ApprovalInstanceDetailDTO:
        context = instance.context
        summary = ApprovalInstanceDTO.from_instance(instance)
        return cls(
            **summary.__dict__,
            history=context.history_lines(),
            last_approver=context.get(ContextKey.LAST_APPROVER),
            last_decision=context.get(ContextKey.LAST_DECISION),
            rejection_reason=context.get(ContextKey.REJECTION_REASON),
            completion_notification=context.get(ContextKey.COMPLETION_NOTIFICATION),
            step_history=[
                StepExecutionDTO(
                    step_name=execution.step_name,
                    status=str(execution.status),
                    started_at=execution.started_at,
                    completed_at=execution.completed_at,
                    attempts=execution.attempts,
                    error=execution.error,
                )
                for execution in context.step_history
            ],
        )
