"""Typed step arguments.

Workflow models configure process steps with a comma-separated argument string
such as ``DECISION:approve,COMMENTS:looks good``. The string is parsed once, at
the component boundary, into the dataclasses below.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from litestar_approvals.core.types import WorkflowRoute

__all__ = ["DecisionArguments", "EscalationArguments", "parse_process_args"]

logger = logging.getLogger(__name__)


def parse_process_args(args: str | None) -> dict[str, str]:
    """Parse a ``KEY:value,KEY2:value2`` argument string.

    Segments are split on ``,``. Leading whitespace of a segment is ignored and
    values are trimmed. The first occurrence of a key wins; segments without a
    ``KEY:`` prefix are ignored.

    Note:
        Stricter parsers of this format only match a key at the very start of
        a segment, so ``"DECISION:approve, COMMENTS:ok"`` would lose its
        comments there. Here the space after the comma is tolerated.

    Args:
        args: The raw argument string, possibly empty or None.

    Returns:
        Mapping of key to value.

    Example:
        >>> parse_process_args("DECISION:approve,COMMENTS:fine")
        {'DECISION': 'approve', 'COMMENTS': 'fine'}
    """
    parsed: dict[str, str] = {}
    if not args:
        return parsed
    for segment in args.split(","):
        key, sep, value = segment.lstrip().partition(":")
        if not sep or not key:
            continue
        parsed.setdefault(key, value.strip())
    return parsed


@dataclass(frozen=True)
class DecisionArguments:
    """Arguments of a decision recording step.

    Attributes:
        decision: The decision as submitted, ``"unknown"`` when absent.
        comments: Free-text comments, empty when absent.
    """

    decision: str = "unknown"
    comments: str = ""

    @classmethod
    def from_process_args(cls, args: str | None) -> DecisionArguments:
        """Build decision arguments from a ``DECISION:...,COMMENTS:...`` string."""
        parsed = parse_process_args(args)
        return cls(decision=parsed.get("DECISION", "unknown"), comments=parsed.get("COMMENTS", ""))

    @property
    def is_reject(self) -> bool:
        return self.decision.lower() == WorkflowRoute.REJECT

    @property
    def is_approve(self) -> bool:
        return self.decision.lower() == WorkflowRoute.APPROVE

    @property
    def is_recognized(self) -> bool:
        """Whether the decision is either ``approve`` or ``reject``, ignoring case."""
        return self.is_approve or self.is_reject


@dataclass(frozen=True)
class EscalationArguments:
    """Arguments of an escalation check step.

    Attributes:
        threshold_hours: Per-invocation threshold override, None to use the default.
    """

    threshold_hours: int | None = None

    @classmethod
    def from_process_args(cls, args: str | None) -> EscalationArguments:
        """Build escalation arguments from a ``THRESHOLD_HOURS:<int>`` string.

        A malformed or negative threshold is logged and ignored.
        """
        raw = parse_process_args(args).get("THRESHOLD_HOURS")
        if raw is None:
            return cls()
        try:
            threshold = int(raw)
        except ValueError:
            logger.warning("Invalid threshold %r in process args, using default", raw)
            return cls()
        if threshold < 0:
            logger.warning("Negative threshold %d in process args, using default", threshold)
            return cls()
        return cls(threshold_hours=threshold)

    def resolve(self, default: int) -> int:
        """Return the override if one was given, otherwise ``default``."""
        return default if self.threshold_hours is None else self.threshold_hours
