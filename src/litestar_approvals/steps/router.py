"""Approver routing for hierarchical approval levels."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.types import ContextKey
from litestar_approvals.steps.base import BaseProcessStep

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from litestar_approvals.core import WorkflowContext

__all__ = ["ApproverRouter", "extract_department", "get_approver_group", "sanitize_group_name"]

logger = logging.getLogger(__name__)

_UNSAFE_GROUP_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_group_name(value: str | None, default: str = "default") -> str:
    """Strip everything but ASCII letters, digits, hyphens and underscores.

    Group names end up in the authorization system, so nothing else may pass.

    Args:
        value: The raw name.
        default: Returned when nothing survives sanitization.

    Returns:
        The sanitized name, or ``default`` if it would be empty.

    Example:
        >>> sanitize_group_name("mark<eting>")
        'marketing'
        >>> sanitize_group_name("../")
        'default'
    """
    if value is None:
        return default
    return _UNSAFE_GROUP_CHARS.sub("", value) or default


def extract_department(path: str | None, index: int = 3, default: str = "default") -> str:
    """Derive the department from a hierarchical content path.

    Example:
        >>> extract_department("/content/site/marketing/campaigns/page")
        'marketing'
        >>> extract_department("/content/site")
        'default'
    """
    if path is None:
        return default
    segments = path.split("/")
    if len(segments) <= index:
        return default
    return sanitize_group_name(segments[index], default)


def get_approver_group(level: int, department: str, config: ApprovalConfig | None = None) -> str:
    """Map an approval level and department to the responsible group.

    Level 1 goes to the department's reviewers, level 2 to its managers and level 3
    to content governance. Anything else falls back to the administrators.
    """
    config = config or ApprovalConfig()
    department = sanitize_group_name(department, config.default_department)
    if level == 1:
        return f"{department}-reviewers"
    if level == 2:
        return f"{department}-managers"
    if level == 3:
        return config.governance_group
    return config.fallback_group


class ApproverRouter(BaseProcessStep):
    """Choose the approver group for the current level and advance the level.

    Routing never blocks the pipeline: any internal failure is logged and the
    work item goes to the fallback group.

    Example:
        >>> router = ApproverRouter()
        >>> await router.get_participant(context, "/content/site/marketing/page")
        'marketing-reviewers'
        >>> context.get("approvalLevel")
        2
    """

    def __init__(
        self,
        name: str = "approver_router",
        description: str = "Routes work items to the approver group of the current level",
        config: ApprovalConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(name, description, config=config, clock=clock)

    async def get_participant(
        self,
        context: WorkflowContext,
        payload: str | None = None,
        *,
        invocation_id: str | None = None,
    ) -> str:
        """Return the approver group for the current level.

        Records ``currentStepStartTime`` and ``currentStepLevel`` for escalation
        tracking and increments ``approvalLevel``. A replayed ``invocation_id``
        returns the group chosen the first time without advancing the level.

        Args:
            context: The workflow context.
            payload: Content location. Defaults to the context payload.
            invocation_id: Optional identifier of this step invocation.

        Returns:
            The approver group name.
        """
        if payload is None:
            payload = context.payload

        if context.has_applied(invocation_id):
            group = context.get(ContextKey.CURRENT_APPROVER_GROUP, self.config.fallback_group)
            logger.debug("Routing invocation %s already applied, returning %s", invocation_id, group)
            return group

        try:
            level = int(context.get(ContextKey.APPROVAL_LEVEL, 1))
            department = extract_department(
                payload,
                index=self.config.department_segment_index,
                default=self.config.default_department,
            )
            group = get_approver_group(level, department, self.config)

            context.set(ContextKey.CURRENT_STEP_START_TIME, self.clock())
            context.set(ContextKey.CURRENT_STEP_LEVEL, level)
            context.set(ContextKey.APPROVAL_LEVEL, level + 1)
            context.set(ContextKey.CURRENT_APPROVER_GROUP, group)
            context.mark_applied(invocation_id)
        except Exception:
            logger.exception("Failed to determine approver for %s", payload)
            return self.config.fallback_group

        logger.info("Routing to %s for level %d approval of %s", group, level, payload)
        return group

    async def execute(self, context: WorkflowContext) -> str:
        return await self.get_participant(context)
