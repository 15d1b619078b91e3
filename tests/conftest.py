"""Shared test fixtures for litestar-approvals test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest

if TYPE_CHECKING:
    from litestar_approvals.config import ApprovalConfig
    from litestar_approvals.core.context import WorkflowContext
    from litestar_approvals.engine.local import LocalApprovalEngine
    from litestar_approvals.store.memory import InMemoryContentStore

MARKETING_PAGE = "/content/site/marketing/page"
START = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Controllable clock for temporal tests."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2024-05-01 09:00:00 UTC."""
    return FixedClock()


@pytest.fixture
def sample_instance_id() -> UUID:
    """Sample instance ID for testing."""
    return uuid4()


@pytest.fixture
def sample_context(sample_instance_id: UUID, clock: FixedClock) -> WorkflowContext:
    """Create a fresh workflow context for the marketing page.

    Args:
        sample_instance_id: Instance identifier
        clock: Test clock

    Returns:
        WorkflowContext instance
    """
    from litestar_approvals.core.context import WorkflowContext

    return WorkflowContext(
        instance_id=sample_instance_id,
        payload=MARKETING_PAGE,
        current_step="Initial Review",
        started_at=clock(),
        initiator="author",
    )


@pytest.fixture
def approval_config() -> ApprovalConfig:
    """Default approval configuration."""
    from litestar_approvals.config import ApprovalConfig

    return ApprovalConfig()


@pytest.fixture
def content_store() -> InMemoryContentStore:
    """In-memory content store holding the marketing page and one asset."""
    from litestar_approvals.store.memory import InMemoryContentStore

    store = InMemoryContentStore()
    store.add(MARKETING_PAGE, properties={"jcr:title": "Spring campaign"})
    store.add("/content/dam/site/logo.png", resource_type="asset", properties={"dc:format": "image/png"})
    return store


@pytest.fixture
def local_engine(approval_config: ApprovalConfig, clock: FixedClock) -> LocalApprovalEngine:
    """Create a local approval runtime driven by the test clock.

    Args:
        approval_config: Approval configuration fixture
        clock: Test clock

    Returns:
        LocalApprovalEngine instance
    """
    from litestar_approvals.engine.local import LocalApprovalEngine

    return LocalApprovalEngine(config=approval_config, clock=clock)
