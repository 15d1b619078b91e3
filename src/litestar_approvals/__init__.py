"""Litestar Approvals - Hierarchical approval workflows for Litestar.

This package provides the decision logic of a multi-level content approval
pipeline, invoked by a workflow runtime at each step.

Key Features:
    - Department-aware approver routing per approval level
    - Append-only audit history of decisions and escalations
    - Idempotent, timeout-based escalation of stalled levels
    - Completion summaries ready for notification delivery
    - In-process runtime and Litestar plugin with a REST API

Example:
    >>> from litestar_approvals import LocalApprovalEngine
    >>>
    >>> engine = LocalApprovalEngine()
    >>> instance = await engine.start_workflow("/content/site/marketing/page", initiator="author")
    >>> instance.assignee_group
    'marketing-reviewers'
"""

from __future__ import annotations

from litestar_approvals.__metadata__ import __project__, __version__
from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core import (
    ContextKey,
    DecisionArguments,
    EscalationArguments,
    EscalationState,
    WorkflowContext,
    WorkflowOutcome,
    WorkflowRoute,
    WorkflowStatus,
)
from litestar_approvals.engine import LocalApprovalEngine
from litestar_approvals.exceptions import (
    ApprovalsError,
    ContentStoreError,
    DecisionRecordingError,
    InvalidDecisionError,
    StepExecutionError,
    WorkflowAlreadyCompletedError,
    WorkflowInstanceNotFoundError,
)
from litestar_approvals.plugin import ApprovalPlugin, ApprovalPluginConfig
from litestar_approvals.steps import (
    ApproverRouter,
    AssetMetadataStep,
    CompletionFinalizer,
    DecisionRecorder,
    EscalationMonitor,
)
from litestar_approvals.store import InMemoryContentStore

__all__ = (
    "ApprovalConfig",
    "ApprovalPlugin",
    "ApprovalPluginConfig",
    "ApprovalsError",
    "ApproverRouter",
    "AssetMetadataStep",
    "CompletionFinalizer",
    "ContentStoreError",
    "ContextKey",
    "DecisionArguments",
    "DecisionRecorder",
    "DecisionRecordingError",
    "EscalationArguments",
    "EscalationMonitor",
    "EscalationState",
    "InMemoryContentStore",
    "InvalidDecisionError",
    "LocalApprovalEngine",
    "StepExecutionError",
    "WorkflowAlreadyCompletedError",
    "WorkflowContext",
    "WorkflowInstanceNotFoundError",
    "WorkflowOutcome",
    "WorkflowRoute",
    "WorkflowStatus",
    "__project__",
    "__version__",
)
