"""Exception hierarchy for litestar-approvals."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

__all__ = (
    "ApprovalsError",
    "ContentStoreError",
    "DecisionRecordingError",
    "InvalidDecisionError",
    "StepExecutionError",
    "WorkflowAlreadyCompletedError",
    "WorkflowInstanceNotFoundError",
)


class ApprovalsError(Exception):
    """Base exception for all litestar-approvals errors.

    All exceptions raised by litestar-approvals inherit from this class, so a
    runtime can catch every approval-related failure with a single except clause.
    """


class DecisionRecordingError(ApprovalsError):
    """Raised when an approval decision could not be recorded.

    Decision recording is a hard failure domain: the hosting runtime is expected
    to retry the step or surface it for manual intervention.

    Attributes:
        approver: The approver whose decision failed to record, if known.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, approver: str | None = None, cause: Exception | None = None) -> None:
        """Initialize the exception with decision details.

        Args:
            message: Description of what went wrong.
            approver: The approver whose decision failed to record.
            cause: The underlying exception, if any.
        """
        self.approver = approver
        self.cause = cause
        if cause:
            message += f": {cause}"
        super().__init__(message)


class InvalidDecisionError(DecisionRecordingError):
    """Raised in strict mode when a decision is neither ``approve`` nor ``reject``.

    Attributes:
        decision: The unrecognised decision value.
    """

    def __init__(self, decision: str, approver: str | None = None) -> None:
        """Initialize the exception with the offending decision.

        Args:
            decision: The unrecognised decision value.
            approver: The approver who submitted it.
        """
        self.decision = decision
        super().__init__(f"Invalid decision '{decision}'", approver=approver)


class ContentStoreError(ApprovalsError):
    """Raised by a content store when a commit conflicts or fails on IO.

    Attributes:
        path: The content path involved, if known.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of the store failure.
            path: The content path involved, if known.
        """
        self.path = path
        super().__init__(message)


class StepExecutionError(ApprovalsError):
    """Raised when a runtime step fails after exhausting its retries.

    Attributes:
        step_name: The name of the step that failed.
        cause: The underlying exception that caused the failure, if any.
    """

    def __init__(self, step_name: str, cause: Exception | None = None) -> None:
        """Initialize the exception with step execution details.

        Args:
            step_name: The name of the step that failed.
            cause: The underlying exception that caused the failure, if any.
        """
        self.step_name = step_name
        self.cause = cause
        msg = f"Step '{step_name}' failed"
        if cause:
            msg += f": {cause}"
        super().__init__(msg)


class WorkflowInstanceNotFoundError(ApprovalsError, KeyError):
    """Raised when a workflow instance is not found.

    Attributes:
        instance_id: The ID of the workflow instance that was not found.
    """

    def __init__(self, instance_id: str | UUID) -> None:
        """Initialize the exception with instance details.

        Args:
            instance_id: The ID of the workflow instance that was not found.
        """
        self.instance_id = instance_id
        super().__init__(f"Workflow instance '{instance_id}' not found")

    def __str__(self) -> str:
        return str(self.args[0])


class WorkflowAlreadyCompletedError(ApprovalsError):
    """Raised when trying to act on a workflow that reached a terminal state.

    Attributes:
        instance_id: The ID of the workflow instance.
        status: The current terminal status of the workflow.
    """

    def __init__(self, instance_id: str | UUID, status: str) -> None:
        """Initialize the exception with workflow state details.

        Args:
            instance_id: The ID of the workflow instance.
            status: The current terminal status of the workflow.
        """
        self.instance_id = instance_id
        self.status = status
        super().__init__(f"Workflow '{instance_id}' is already {status}")
