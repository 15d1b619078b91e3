"""Tests for the step base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.protocols import Step
from litestar_approvals.steps import (
    ApproverRouter,
    AssetMetadataStep,
    CompletionFinalizer,
    EscalationMonitor,
)
from litestar_approvals.steps.base import BaseProcessStep, BaseStep

if TYPE_CHECKING:
    from litestar_approvals.core.context import WorkflowContext
    from litestar_approvals.store.memory import InMemoryContentStore


@pytest.mark.unit
class TestBaseStep:
    """Tests for BaseStep and BaseProcessStep."""

    def test_attributes(self) -> None:
        step = BaseStep("custom", "A custom step")

        assert step.name == "custom"
        assert step.description == "A custom step"

    @pytest.mark.asyncio
    async def test_execute_must_be_overridden(self, sample_context: WorkflowContext) -> None:
        with pytest.raises(NotImplementedError, match="custom"):
            await BaseStep("custom").execute(sample_context)

    def test_process_step_defaults(self) -> None:
        step = BaseProcessStep("process")

        assert step.config == ApprovalConfig()
        assert step.clock().tzinfo is not None

    def test_components_satisfy_step_protocol(self, content_store: InMemoryContentStore) -> None:
        steps = [ApproverRouter(), EscalationMonitor(), CompletionFinalizer(), AssetMetadataStep(content_store)]

        assert all(isinstance(step, Step) for step in steps)
        assert [step.name for step in steps] == [
            "approver_router",
            "escalation_monitor",
            "completion_finalizer",
            "asset_metadata",
        ]
