"""Workflow execution context.

This module provides the WorkflowContext dataclass which carries the shared
property bag of one workflow instance through every component invocation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from litestar_approvals.core.types import ContextKey

__all__ = ["StepExecution", "WorkflowContext", "format_timestamp", "utc_now"]


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp the way audit history lines expect it.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 9, 30, 0))
        '2024-05-01 09:30:00'
    """
    return moment.strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class StepExecution:
    """Record of a single step execution within a workflow.

    Attributes:
        step_name: Name of the executed step.
        status: Final status of the step execution.
        started_at: Timestamp when step execution began.
        completed_at: Timestamp when step execution finished.
        attempts: Number of attempts the runtime needed.
        invocation_id: Identifier of the step invocation.
        error: Error message if execution failed.
    """

    step_name: str
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    attempts: int = 1
    invocation_id: str | None = None
    error: str | None = None


@dataclass
class WorkflowContext:
    """Execution context shared by the approval components of one instance.

    The context is owned by the hosting runtime and handed by reference to every
    component call. ``data`` is the mutable property bag the components
    communicate through; nothing else is shared between them.

    Attributes:
        instance_id: Unique identifier for this workflow instance.
        payload: Location of the content item under approval.
        data: Mutable property bag shared by all components.
        metadata: Metadata supplied when the instance was started.
        current_step: Title of the step currently being processed.
        step_history: Chronological record of runtime step executions.
        started_at: Timestamp when the workflow instance was created.
        initiator: User who started the workflow, if known.

    Example:
        >>> from uuid import uuid4
        >>> context = WorkflowContext(instance_id=uuid4(), payload="/content/site/hr/page")
        >>> context.set("approvalLevel", 2)
        >>> context.get("approvalLevel")
        2
    """

    instance_id: UUID
    payload: str
    data: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    current_step: str | None = None
    step_history: list[StepExecution] = field(default_factory=list)
    started_at: datetime = field(default_factory=utc_now)
    initiator: str | None = None

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a value from the property bag.

        Args:
            key: The key to look up.
            default: Value to return if the key is absent.

        Returns:
            The stored value, or the default if not present.
        """
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a value in the property bag.

        Args:
            key: The key to set.
            value: The value to associate with the key.
        """
        self.data[str(key)] = value

    def append_history(self, line: str) -> None:
        """Append one line to the approval history.

        History is stored newline-joined. The first entry becomes the whole
        history, without a leading newline.

        Args:
            line: The audit line to append.
        """
        existing = self.data.get(ContextKey.APPROVAL_HISTORY, "")
        self.set(ContextKey.APPROVAL_HISTORY, f"{existing}\n{line}" if existing else line)

    def history_lines(self) -> list[str]:
        """Return the approval history as a list of lines, oldest first."""
        history = self.data.get(ContextKey.APPROVAL_HISTORY, "")
        return history.split("\n") if history else []

    def has_applied(self, invocation_id: str | None) -> bool:
        """Check whether a step invocation was already applied to this context.

        Args:
            invocation_id: Identifier of the step invocation. ``None`` never matches.

        Returns:
            True if the invocation was recorded by :meth:`mark_applied`.
        """
        if invocation_id is None:
            return False
        return invocation_id in self.data.get(ContextKey.APPLIED_INVOCATIONS, [])

    def mark_applied(self, invocation_id: str | None) -> None:
        """Record that a step invocation has been applied.

        Args:
            invocation_id: Identifier of the step invocation. ``None`` is ignored.
        """
        if invocation_id is None:
            return
        applied = self.data.setdefault(str(ContextKey.APPLIED_INVOCATIONS), [])
        applied.append(invocation_id)

    def snapshot(self) -> dict[str, Any]:
        """Deep-copy the property bag so a failed step can be rolled back."""
        return copy.deepcopy(self.data)

    def restore(self, snapshot: dict[str, Any]) -> None:
        """Replace the property bag with a snapshot taken by :meth:`snapshot`.

        The dictionary object is kept, so references held by the runtime stay valid.

        Args:
            snapshot: The snapshot to restore.
        """
        self.data.clear()
        self.data.update(snapshot)

    def get_last_execution(self, step_name: str | None = None) -> StepExecution | None:
        """Get the most recent execution record for a step.

        Args:
            step_name: Optional step name to filter by. If None, returns the
                last execution regardless of step.

        Returns:
            The most recent StepExecution matching the criteria, or None if not found.
        """
        if step_name is None:
            return self.step_history[-1] if self.step_history else None

        for execution in reversed(self.step_history):
            if execution.step_name == step_name:
                return execution
        return None
