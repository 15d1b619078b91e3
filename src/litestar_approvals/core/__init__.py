"""Core domain module for litestar-approvals.

This module exports the fundamental building blocks shared by the approval
components: types, the workflow context, typed step arguments and protocols.
"""

from __future__ import annotations

from litestar_approvals.core.arguments import DecisionArguments, EscalationArguments, parse_process_args
from litestar_approvals.core.context import StepExecution, WorkflowContext, format_timestamp, utc_now
from litestar_approvals.core.models import WorkflowInstanceData
from litestar_approvals.core.protocols import ContentResource, ContentStore, Step
from litestar_approvals.core.types import (
    ContextKey,
    EscalationState,
    StepStatus,
    WorkflowOutcome,
    WorkflowRoute,
    WorkflowStatus,
)

__all__ = [
    "ContentResource",
    "ContentStore",
    "ContextKey",
    "DecisionArguments",
    "EscalationArguments",
    "EscalationState",
    "Step",
    "StepExecution",
    "StepStatus",
    "WorkflowContext",
    "WorkflowInstanceData",
    "WorkflowOutcome",
    "WorkflowRoute",
    "WorkflowStatus",
    "format_timestamp",
    "parse_process_args",
    "utc_now",
]
