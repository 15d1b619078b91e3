"""Tests for timeout based escalation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.arguments import EscalationArguments
from litestar_approvals.core.types import ContextKey, EscalationState
from litestar_approvals.steps.escalation import EscalationMonitor, escalation_state

if TYPE_CHECKING:
    from litestar_approvals.core.context import WorkflowContext
    from tests.conftest import FixedClock


@pytest.fixture
def tracked_context(sample_context: WorkflowContext, clock: FixedClock) -> WorkflowContext:
    """Context whose first level was routed at the current clock time."""
    sample_context.set(ContextKey.CURRENT_STEP_START_TIME, clock())
    sample_context.set(ContextKey.CURRENT_STEP_LEVEL, 1)
    sample_context.set(ContextKey.APPROVAL_LEVEL, 2)
    return sample_context


@pytest.mark.unit
class TestEscalationState:
    """Tests for reading the escalation state."""

    def test_not_tracked(self, sample_context: WorkflowContext) -> None:
        assert escalation_state(sample_context) == EscalationState.NOT_TRACKED

    def test_tracked_pending(self, tracked_context: WorkflowContext) -> None:
        assert escalation_state(tracked_context) == EscalationState.TRACKED_PENDING

    def test_escalated(self, tracked_context: WorkflowContext) -> None:
        tracked_context.set(ContextKey.ESCALATED, True)

        assert escalation_state(tracked_context) == EscalationState.ESCALATED


@pytest.mark.unit
@pytest.mark.asyncio
class TestEscalationMonitor:
    """Tests for EscalationMonitor."""

    async def test_first_poll_starts_tracking(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)

        state = await monitor.check(sample_context)

        assert state == EscalationState.TRACKED_PENDING
        assert sample_context.get(ContextKey.CURRENT_STEP_START_TIME) == clock()
        assert sample_context.get(ContextKey.ESCALATED) is False
        assert sample_context.history_lines() == []

    async def test_first_poll_keeps_existing_escalation(
        self, sample_context: WorkflowContext, clock: FixedClock
    ) -> None:
        sample_context.set(ContextKey.ESCALATED, True)
        monitor = EscalationMonitor(clock=clock)

        state = await monitor.check(sample_context)

        assert state == EscalationState.ESCALATED
        assert sample_context.get(ContextKey.ESCALATED) is True

    async def test_below_threshold(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=47, minutes=59)

        state = await monitor.check(tracked_context)

        assert state == EscalationState.TRACKED_PENDING
        assert tracked_context.get(ContextKey.ESCALATED, False) is False

    async def test_threshold_reached(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=48)

        state = await monitor.check(tracked_context)

        assert state == EscalationState.ESCALATED
        assert tracked_context.get(ContextKey.ESCALATED) is True
        assert tracked_context.get(ContextKey.ESCALATION_TIME) == clock()
        assert tracked_context.get(ContextKey.ESCALATION_TARGET) == "department-managers"
        assert tracked_context.get(ContextKey.ESCALATION_REASON) == (
            "Approval timeout: 48 hours exceeded threshold of 48 hours"
        )
        assert tracked_context.history_lines() == ["[2024-05-03 09:00:00] ESCALATION: Timeout after 48 hours"]

    async def test_escalation_is_recorded_once(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=49)
        await monitor.check(tracked_context)
        escalation_time = tracked_context.get(ContextKey.ESCALATION_TIME)

        clock.advance(hours=24)
        state = await monitor.check(tracked_context)

        assert state == EscalationState.ESCALATED
        assert tracked_context.get(ContextKey.ESCALATION_TIME) == escalation_time
        assert len(tracked_context.history_lines()) == 1

    async def test_escalation_appends_to_existing_history(
        self, tracked_context: WorkflowContext, clock: FixedClock
    ) -> None:
        tracked_context.append_history("[2024-05-01 08:00:00] Initial Review: APPROVED by alice")
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=50)

        await monitor.check(tracked_context)

        assert tracked_context.history_lines() == [
            "[2024-05-01 08:00:00] Initial Review: APPROVED by alice",
            "[2024-05-03 11:00:00] ESCALATION: Timeout after 50 hours",
        ]

    @pytest.mark.parametrize(
        ("level", "target"),
        [(1, "department-managers"), (2, "content-governance"), (3, "administrators")],
    )
    async def test_target_depends_on_level(
        self, tracked_context: WorkflowContext, clock: FixedClock, level: int, target: str
    ) -> None:
        tracked_context.set(ContextKey.CURRENT_STEP_LEVEL, level)
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=48)

        await monitor.check(tracked_context)

        assert tracked_context.get(ContextKey.ESCALATION_TARGET) == target

    async def test_threshold_override_per_poll(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=24)

        state = await monitor.check(tracked_context, "THRESHOLD_HOURS:24")

        assert state == EscalationState.ESCALATED
        assert "threshold of 24 hours" in tracked_context.get(ContextKey.ESCALATION_REASON)

    async def test_threshold_override_on_step(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock, arguments=EscalationArguments(threshold_hours=2))
        clock.advance(hours=3)

        assert await monitor.execute(tracked_context) == EscalationState.ESCALATED

    async def test_configured_default_threshold(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(config=ApprovalConfig(default_threshold_hours=12), clock=clock)
        clock.advance(hours=12)

        assert await monitor.check(tracked_context) == EscalationState.ESCALATED

    async def test_malformed_override_uses_default(self, tracked_context: WorkflowContext, clock: FixedClock) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=24)

        state = await monitor.check(tracked_context, "THRESHOLD_HOURS:soon")

        assert state == EscalationState.TRACKED_PENDING

    async def test_clock_before_start_never_escalates(
        self, tracked_context: WorkflowContext, clock: FixedClock
    ) -> None:
        monitor = EscalationMonitor(clock=clock)
        clock.advance(hours=-5)

        state = await monitor.check(tracked_context, "THRESHOLD_HOURS:0")

        assert state == EscalationState.TRACKED_PENDING
        assert tracked_context.get(ContextKey.ESCALATED, False) is False

    async def test_iso_string_start_time(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        sample_context.set(ContextKey.CURRENT_STEP_START_TIME, "2024-04-28T09:00:00")
        monitor = EscalationMonitor(clock=clock)

        state = await monitor.check(sample_context)

        assert state == EscalationState.ESCALATED
        assert "Timeout after 72 hours" in sample_context.history_lines()[0]

    async def test_fault_is_not_an_escalation(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        sample_context.set(ContextKey.CURRENT_STEP_START_TIME, "not a timestamp")
        before = sample_context.snapshot()
        monitor = EscalationMonitor(clock=clock)

        state = await monitor.check(sample_context)

        assert state == EscalationState.TRACKED_PENDING
        assert sample_context.data == before
