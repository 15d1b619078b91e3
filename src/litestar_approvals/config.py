"""Configuration for the approval components.

This module provides the ApprovalConfig dataclass shared by the router, the
escalation monitor, the decision recorder and the local runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["ApprovalConfig"]


def _default_escalation_targets() -> dict[int, str]:
    return {1: "department-managers", 2: "content-governance"}


def _default_level_titles() -> dict[int, str]:
    return {1: "Initial Review", 2: "Department Approval", 3: "Final Approval"}


@dataclass
class ApprovalConfig:
    """Configuration for hierarchical approval routing and escalation.

    Attributes:
        default_threshold_hours: Hours a level may stay pending before it is
            escalated, unless a step overrides it with ``THRESHOLD_HOURS``.
        fallback_group: Group that receives anything that cannot be routed.
        governance_group: Group handling the final approval level.
        department_segment_index: Index of the department segment in a
            slash-delimited content path.
        default_department: Department used when the path has none.
        escalation_targets: Map of step level to escalation target. Levels not
            listed escalate to ``fallback_group``.
        level_titles: Display titles of the approval levels, in order.
        strict_decisions: Raise on decisions that are neither approve nor reject
            instead of treating them as approvals.
        step_retry_attempts: How many times the local runtime attempts a failing step.

    Example:
        >>> config = ApprovalConfig(default_threshold_hours=24, strict_decisions=True)
    """

    default_threshold_hours: int = 48
    fallback_group: str = "administrators"
    governance_group: str = "content-governance"
    department_segment_index: int = 3
    default_department: str = "default"
    escalation_targets: dict[int, str] = field(default_factory=_default_escalation_targets)
    level_titles: dict[int, str] = field(default_factory=_default_level_titles)
    strict_decisions: bool = False
    step_retry_attempts: int = 3

    @property
    def final_level(self) -> int:
        """The highest approval level of the pipeline."""
        return max(self.level_titles)

    def level_title(self, level: int) -> str:
        """Return the display title of an approval level."""
        return self.level_titles.get(level, f"Level {level} Approval")

    def escalation_target(self, level: int) -> str:
        """Return the group a stalled level escalates to."""
        return self.escalation_targets.get(level, self.fallback_group)
