"""REST API for litestar-approvals.

This module provides the controller and DTOs mounted by the ApprovalPlugin
when ``enable_api`` is set.
"""

from __future__ import annotations

from litestar_approvals.web.controllers import ApprovalController
from litestar_approvals.web.dto import (
    ApprovalInstanceDetailDTO,
    ApprovalInstanceDTO,
    DecisionDTO,
    StartApprovalDTO,
    StepExecutionDTO,
    TerminateDTO,
)

__all__ = [
    "ApprovalController",
    "ApprovalInstanceDTO",
    "ApprovalInstanceDetailDTO",
    "DecisionDTO",
    "StartApprovalDTO",
    "StepExecutionDTO",
    "TerminateDTO",
]
