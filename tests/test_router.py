"""Tests for approver routing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.types import ContextKey
from litestar_approvals.steps.router import (
    ApproverRouter,
    extract_department,
    get_approver_group,
    sanitize_group_name,
)

if TYPE_CHECKING:
    from litestar_approvals.core.context import WorkflowContext
    from tests.conftest import FixedClock


@pytest.mark.unit
class TestSanitizeGroupName:
    """Tests for group name sanitization."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("marketing", "marketing"),
            ("mark<eting>", "marketing"),
            ("human_resources-emea", "human_resources-emea"),
            ("sales team", "salesteam"),
            ("../", "default"),
            ("", "default"),
            (None, "default"),
        ],
    )
    def test_sanitize(self, value: str | None, expected: str) -> None:
        assert sanitize_group_name(value) == expected

    def test_non_ascii_letters_are_removed(self) -> None:
        assert sanitize_group_name("vertrieb-ü") == "vertrieb-"


@pytest.mark.unit
class TestExtractDepartment:
    """Tests for department extraction from content paths."""

    def test_fourth_segment(self) -> None:
        assert extract_department("/content/site/marketing/page") == "marketing"

    def test_deep_path(self) -> None:
        assert extract_department("/content/site/hr/policies/leave/page") == "hr"

    @pytest.mark.parametrize("path", ["/content/site", "/content", "", None, "/content/site/"])
    def test_short_paths_use_default(self, path: str | None) -> None:
        assert extract_department(path) == "default"

    def test_segment_is_sanitized(self) -> None:
        assert extract_department("/content/site/fin;ance/page") == "finance"

    def test_custom_index_and_default(self) -> None:
        assert extract_department("/sites/legal/page", index=2, default="shared") == "legal"
        assert extract_department("/sites", index=2, default="shared") == "shared"


@pytest.mark.unit
class TestGetApproverGroup:
    """Tests for the level to group mapping."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (1, "marketing-reviewers"),
            (2, "marketing-managers"),
            (3, "content-governance"),
            (4, "administrators"),
            (0, "administrators"),
            (-1, "administrators"),
        ],
    )
    def test_levels(self, level: int, expected: str) -> None:
        assert get_approver_group(level, "marketing") == expected

    def test_configured_groups(self) -> None:
        config = ApprovalConfig(governance_group="governance", fallback_group="ops")

        assert get_approver_group(3, "marketing", config) == "governance"
        assert get_approver_group(7, "marketing", config) == "ops"


@pytest.mark.unit
@pytest.mark.asyncio
class TestApproverRouter:
    """Tests for ApproverRouter."""

    async def test_first_level_routes_to_reviewers(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        router = ApproverRouter(clock=clock)

        group = await router.get_participant(sample_context)

        assert group == "marketing-reviewers"
        assert sample_context.get(ContextKey.APPROVAL_LEVEL) == 2
        assert sample_context.get(ContextKey.CURRENT_STEP_LEVEL) == 1
        assert sample_context.get(ContextKey.CURRENT_STEP_START_TIME) == clock()
        assert sample_context.get(ContextKey.CURRENT_APPROVER_GROUP) == "marketing-reviewers"

    async def test_levels_advance(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        router = ApproverRouter(clock=clock)

        groups = [await router.get_participant(sample_context) for _ in range(4)]

        assert groups == ["marketing-reviewers", "marketing-managers", "content-governance", "administrators"]
        assert sample_context.get(ContextKey.APPROVAL_LEVEL) == 5

    async def test_start_time_is_refreshed_per_level(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        router = ApproverRouter(clock=clock)
        await router.get_participant(sample_context)

        clock.advance(hours=5)
        await router.get_participant(sample_context)

        assert sample_context.get(ContextKey.CURRENT_STEP_START_TIME) == clock()
        assert sample_context.get(ContextKey.CURRENT_STEP_LEVEL) == 2

    async def test_explicit_payload(self, sample_context: WorkflowContext, clock: FixedClock) -> None:
        router = ApproverRouter(clock=clock)

        assert await router.get_participant(sample_context, "/content/site/legal/terms") == "legal-reviewers"

    async def test_short_payload_routes_default_department(
        self, sample_context: WorkflowContext, clock: FixedClock
    ) -> None:
        router = ApproverRouter(clock=clock)

        assert await router.get_participant(sample_context, "/content") == "default-reviewers"

    async def test_failure_falls_back_without_advancing(self, sample_context: WorkflowContext) -> None:
        sample_context.set(ContextKey.APPROVAL_LEVEL, "not-a-number")
        router = ApproverRouter()

        group = await router.get_participant(sample_context)

        assert group == "administrators"
        assert sample_context.get(ContextKey.APPROVAL_LEVEL) == "not-a-number"
        assert sample_context.get(ContextKey.CURRENT_STEP_START_TIME) is None

    async def test_replayed_invocation_does_not_advance(
        self, sample_context: WorkflowContext, clock: FixedClock
    ) -> None:
        router = ApproverRouter(clock=clock)

        first = await router.get_participant(sample_context, invocation_id="route-1")
        replay = await router.get_participant(sample_context, invocation_id="route-1")

        assert first == replay == "marketing-reviewers"
        assert sample_context.get(ContextKey.APPROVAL_LEVEL) == 2

    async def test_execute_delegates_to_get_participant(self, sample_context: WorkflowContext) -> None:
        router = ApproverRouter()

        assert await router.execute(sample_context) == "marketing-reviewers"
