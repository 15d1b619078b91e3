"""Core type definitions for litestar-approvals.

This module defines the enums shared by the approval components and the keys
of the workflow context property bag they read and write.
"""

from __future__ import annotations

from enum import StrEnum, auto

__all__ = [
    "ContextKey",
    "EscalationState",
    "StepStatus",
    "WorkflowOutcome",
    "WorkflowRoute",
    "WorkflowStatus",
]


class ContextKey(StrEnum):
    """Keys of the shared workflow context.

    The values are the exact keys the routing model and the hosting runtime
    read, so they must stay stable across releases.
    """

    APPROVAL_LEVEL = "approvalLevel"
    CURRENT_STEP_START_TIME = "currentStepStartTime"
    CURRENT_STEP_LEVEL = "currentStepLevel"
    CURRENT_APPROVER_GROUP = "currentApproverGroup"
    ESCALATED = "escalated"
    ESCALATION_TIME = "escalationTime"
    ESCALATION_REASON = "escalationReason"
    ESCALATION_TARGET = "escalationTarget"
    APPROVAL_HISTORY = "approvalHistory"
    LAST_APPROVER = "lastApprover"
    LAST_DECISION = "lastDecision"
    LAST_DECISION_TIME = "lastDecisionTime"
    WORKFLOW_ROUTE = "workflowRoute"
    REJECTION_REASON = "rejectionReason"
    WORKFLOW_COMPLETED = "workflowCompleted"
    WORKFLOW_COMPLETED_TIME = "workflowCompletedTime"
    WORKFLOW_OUTCOME = "workflowOutcome"
    COMPLETION_NOTIFICATION = "completionNotification"
    APPLIED_INVOCATIONS = "appliedInvocations"
    ASSET_PROCESSED = "assetProcessed"
    PROCESSED_AT = "processedAt"


class WorkflowRoute(StrEnum):
    """Routing outcome consumed by the pipeline's branching logic.

    Attributes:
        APPROVE: Continue to the next approval level.
        REJECT: Send the content back to its author.
    """

    APPROVE = auto()
    REJECT = auto()


class WorkflowOutcome(StrEnum):
    """Final outcome written once the pipeline reaches its terminal state."""

    APPROVED = auto()
    REJECTED = auto()


class EscalationState(StrEnum):
    """Escalation tracking state of the level being monitored.

    Attributes:
        NOT_TRACKED: No step start time recorded yet.
        TRACKED_PENDING: Level is being timed and has not breached its threshold.
        ESCALATED: Threshold breached and escalation recorded. Terminal.
    """

    NOT_TRACKED = auto()
    TRACKED_PENDING = auto()
    ESCALATED = auto()


class StepStatus(StrEnum):
    """Execution status of a runtime step.

    Attributes:
        SUCCEEDED: Step completed successfully.
        FAILED: Step failed after exhausting its retries.
        SKIPPED: Step was a replay of an already-applied invocation.
    """

    SUCCEEDED = auto()
    FAILED = auto()
    SKIPPED = auto()


class WorkflowStatus(StrEnum):
    """Overall status of a workflow instance.

    Attributes:
        RUNNING: Workflow is executing an automated step.
        WAITING: Workflow is waiting for an approver group to decide.
        COMPLETED: Workflow reached its End state.
        FAILED: Workflow terminated due to an unrecoverable step failure.
        TERMINATED: Workflow was terminated by an operator.
    """

    RUNNING = auto()
    WAITING = auto()
    COMPLETED = auto()
    FAILED = auto()
    TERMINATED = auto()

