"""Concrete data models for litestar-approvals.

This module provides the dataclass holding the runtime state of one approval
workflow instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from litestar_approvals.core.types import WorkflowStatus

if TYPE_CHECKING:
    from litestar_approvals.core.context import WorkflowContext


__all__ = ["WorkflowInstanceData"]


@dataclass
class WorkflowInstanceData:
    """Runtime state of an approval workflow instance.

    Attributes:
        id: Unique identifier for this workflow instance.
        payload: Location of the content item under approval.
        status: Current execution status.
        context: The shared workflow context.
        assignee_group: Approver group the pending level is assigned to.
        started_at: Timestamp when the instance was created.
        completed_at: Timestamp when the instance finished.
        error: Error message of the last failed step, or the termination reason.
    """

    id: UUID
    payload: str
    status: WorkflowStatus
    context: WorkflowContext
    started_at: datetime
    assignee_group: str | None = None
    completed_at: datetime | None = None
    error: str | None = None

    @property
    def current_step(self) -> str | None:
        """Title of the step the instance is at."""
        return self.context.current_step

    @property
    def is_finished(self) -> bool:
        return self.status in (WorkflowStatus.COMPLETED, WorkflowStatus.FAILED, WorkflowStatus.TERMINATED)
