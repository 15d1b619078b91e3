"""Approval runtime implementations.

This module provides the in-process runtime that drives the approval pipeline
and invokes the approval components at the right points.
"""

from __future__ import annotations

from litestar_approvals.engine.local import PUBLISH_STEP, REVISE_STEP, LocalApprovalEngine

__all__ = [
    "PUBLISH_STEP",
    "REVISE_STEP",
    "LocalApprovalEngine",
]
