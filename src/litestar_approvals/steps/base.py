"""Base step implementations for litestar-approvals."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.context import utc_now

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_approvals.core import WorkflowContext


class BaseStep:
    """Base implementation with common functionality for all steps.

    Subclass this to create custom step types the runtime can execute.
    """

    name: str
    """Unique identifier for the step."""

    description: str = ""
    """Human-readable description of what the step does."""

    def __init__(self, name: str, description: str = "") -> None:
        """Initialize the base step.

        Args:
            name: Unique identifier for the step.
            description: Human-readable description.
        """
        self.name = name
        self.description = description

    async def execute(self, context: WorkflowContext) -> Any:
        """Execute the step with the given context.

        Override this method to implement step logic.

        Args:
            context: The workflow execution context.

        Returns:
            The result of the step execution.

        Raises:
            NotImplementedError: Must be implemented by subclasses.
        """
        msg = f"Step {self.name} must implement execute()"
        raise NotImplementedError(msg)


class BaseProcessStep(BaseStep):
    """Base for automated approval process steps.

    Process steps share an :class:`ApprovalConfig` and a clock, so the temporal
    logic can be driven deterministically in tests.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the process step.

        Args:
            name: Unique identifier for the step.
            description: Human-readable description.
            config: Approval configuration. Defaults to ``ApprovalConfig()``.
            clock: Callable returning the current time. Defaults to UTC now.
        """
        super().__init__(name, description)
        self.config = config or ApprovalConfig()
        self.clock = clock or utc_now
