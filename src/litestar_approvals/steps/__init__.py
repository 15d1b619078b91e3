"""Approval process steps for litestar-approvals."""

from __future__ import annotations

from litestar_approvals.steps.asset import AssetMetadataStep
from litestar_approvals.steps.base import BaseProcessStep, BaseStep
from litestar_approvals.steps.completion import CompletionFinalizer, build_completion_notification
from litestar_approvals.steps.decision import DecisionRecorder, format_decision_entry
from litestar_approvals.steps.escalation import EscalationMonitor, escalation_state
from litestar_approvals.steps.router import (
    ApproverRouter,
    extract_department,
    get_approver_group,
    sanitize_group_name,
)

__all__ = [
    "ApproverRouter",
    "AssetMetadataStep",
    "BaseProcessStep",
    "BaseStep",
    "CompletionFinalizer",
    "DecisionRecorder",
    "EscalationMonitor",
    "build_completion_notification",
    "escalation_state",
    "extract_department",
    "format_decision_entry",
    "get_approver_group",
    "sanitize_group_name",
]
