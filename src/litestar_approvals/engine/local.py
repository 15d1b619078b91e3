"""Local in-memory approval runtime.

This module provides an in-process runtime driving the hierarchical approval
pipeline. It is suitable for development, testing, and single-instance
deployments; distributed runtimes call the same components at the same points.

Pipeline::

    Initial Review -> Department Approval -> Final Approval -> Publish -> End
         |                  |                     |
         +------------------+---------------------+-> Revise -> End
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import UUID, uuid4

from litestar_approvals.config import ApprovalConfig
from litestar_approvals.core.arguments import DecisionArguments
from litestar_approvals.core.context import StepExecution, WorkflowContext, utc_now
from litestar_approvals.core.models import WorkflowInstanceData
from litestar_approvals.core.types import ContextKey, EscalationState, StepStatus, WorkflowRoute, WorkflowStatus
from litestar_approvals.exceptions import (
    InvalidDecisionError,
    StepExecutionError,
    WorkflowAlreadyCompletedError,
    WorkflowInstanceNotFoundError,
)
from litestar_approvals.steps import ApproverRouter, CompletionFinalizer, DecisionRecorder, EscalationMonitor
from litestar_approvals.steps.escalation import escalation_state

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
    from datetime import datetime

    from litestar_approvals.core import ContentStore, EscalationArguments

__all__ = ["LocalApprovalEngine", "PUBLISH_STEP", "REVISE_STEP"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

PUBLISH_STEP = "Publish"
REVISE_STEP = "Notify Author & Revise"


class LocalApprovalEngine:
    """In-memory runtime for hierarchical approval workflows.

    Every component invocation runs as one atomic step: the context is
    snapshotted first and restored if the step raises, then the step is retried
    with the same invocation identifier up to ``config.step_retry_attempts``
    times. Steps of one instance never interleave.

    Attributes:
        config: Approval configuration shared with the components.
        router: Chooses the approver group of each level.
        recorder: Records submitted decisions.
        monitor: Escalates stalled levels.
        finalizer: Summarizes finished workflows.

    Example:
        >>> engine = LocalApprovalEngine()
        >>> instance = await engine.start_workflow("/content/site/marketing/page", initiator="author")
        >>> instance.assignee_group
        'marketing-reviewers'
        >>> await engine.submit_decision(instance.id, "alice", "approve", "looks good")
    """

    def __init__(
        self,
        config: ApprovalConfig | None = None,
        content_store: ContentStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the local runtime.

        Args:
            config: Approval configuration. Defaults to ``ApprovalConfig()``.
            content_store: Optional store decisions and outcomes are stamped onto.
            clock: Callable returning the current time. Defaults to UTC now.
        """
        self.config = config or ApprovalConfig()
        self.content_store = content_store
        self.clock = clock or utc_now
        self.router = ApproverRouter(config=self.config, clock=self.clock)
        self.recorder = DecisionRecorder(config=self.config, clock=self.clock, content_store=content_store)
        self.monitor = EscalationMonitor(config=self.config, clock=self.clock)
        self.finalizer = CompletionFinalizer(config=self.config, clock=self.clock, content_store=content_store)
        self._instances: dict[UUID, WorkflowInstanceData] = {}
        self._locks: defaultdict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def start_workflow(
        self,
        payload: str,
        initiator: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> WorkflowInstanceData:
        """Start a new approval workflow and assign its first level.

        Args:
            payload: Location of the content item to approve.
            initiator: User starting the workflow.
            metadata: Optional metadata stored on the context.

        Returns:
            The created instance, waiting on its first approver group.
        """
        instance_id = uuid4()
        now = self.clock()
        context = WorkflowContext(
            instance_id=instance_id,
            payload=payload,
            metadata=dict(metadata or {}),
            started_at=now,
            initiator=initiator,
        )
        instance = WorkflowInstanceData(
            id=instance_id,
            payload=payload,
            status=WorkflowStatus.RUNNING,
            context=context,
            started_at=now,
        )
        self._instances[instance_id] = instance

        async with self._locked(instance):
            await self._assign(instance)

        logger.info("Started approval workflow %s for %s", instance_id, payload)
        return instance

    async def bulk_start(self, payloads: Iterable[str], initiator: str | None = None) -> list[WorkflowInstanceData]:
        """Start one workflow per payload.

        A payload whose workflow fails to start is logged and skipped.

        Returns:
            The instances that were started.
        """
        payloads = list(payloads)
        logger.info("Starting bulk workflows for %d resources", len(payloads))
        started = []
        for payload in payloads:
            try:
                started.append(await self.start_workflow(payload, initiator))
            except StepExecutionError:
                logger.exception("Failed to start workflow for resource: %s", payload)
        logger.info("Successfully started %d out of %d workflows", len(started), len(payloads))
        return started

    async def submit_decision(
        self,
        instance_id: UUID,
        approver: str,
        decision: str,
        comments: str = "",
        invocation_id: str | None = None,
    ) -> WorkflowInstanceData:
        """Record an approver's decision and move the workflow on.

        An approval advances to the next level, or publishes and completes after
        the final level. A rejection completes the workflow through the revise
        branch. Resubmitting an ``invocation_id`` that was already applied
        changes nothing.

        Args:
            instance_id: The workflow instance ID.
            approver: Identity of the approver.
            decision: ``approve`` or ``reject``.
            comments: Optional comments.
            invocation_id: Optional idempotency key of this submission.

        Returns:
            The updated instance.

        Raises:
            WorkflowInstanceNotFoundError: If the instance does not exist.
            WorkflowAlreadyCompletedError: If the instance is not waiting for a decision.
            InvalidDecisionError: In strict mode, for an unrecognised decision.
            StepExecutionError: If recording failed on every attempt. The instance
                keeps waiting, so the submission can be retried. A decision that
                was recorded but could not be finalized leaves the instance FAILED
                instead of raising.
        """
        instance = await self.get_instance(instance_id)
        async with self._locked(instance):
            if instance.context.has_applied(invocation_id):
                logger.info("Decision %s already applied to workflow %s", invocation_id, instance_id)
                self._record_step(instance, "record_decision", StepStatus.SKIPPED, invocation_id=invocation_id)
                return instance
            if instance.status != WorkflowStatus.WAITING:
                raise WorkflowAlreadyCompletedError(instance_id, instance.status)

            arguments = DecisionArguments(decision=decision, comments=comments)
            try:
                await self._run_step(
                    instance,
                    "record_decision",
                    lambda inv: self.recorder.record(instance.context, arguments, approver, invocation_id=inv),
                    invocation_id=invocation_id,
                )
            except StepExecutionError as e:
                instance.error = str(e)
                raise
            instance.error = None

            if instance.context.get(ContextKey.WORKFLOW_ROUTE) == WorkflowRoute.REJECT:
                await self._complete(instance, REVISE_STEP)
            elif int(instance.context.get(ContextKey.CURRENT_STEP_LEVEL, 1)) >= self.config.final_level:
                await self._complete(instance, PUBLISH_STEP)
            else:
                await self._assign(instance)
        return instance

    async def poll_escalations(
        self,
        arguments: str | EscalationArguments | None = None,
    ) -> list[WorkflowInstanceData]:
        """Run the escalation monitor over every waiting instance.

        Args:
            arguments: Optional ``THRESHOLD_HOURS:<int>`` override for this poll.

        Returns:
            The instances escalated by this poll.
        """
        escalated = []
        for instance in self.list_instances(WorkflowStatus.WAITING):
            async with self._locked(instance):
                before = escalation_state(instance.context)
                state = await self.monitor.check(instance.context, arguments)
                if state == EscalationState.ESCALATED and before != EscalationState.ESCALATED:
                    self._record_step(instance, "escalate", StepStatus.SUCCEEDED)
                    escalated.append(instance)
        if escalated:
            logger.info("Escalated %d workflow(s)", len(escalated))
        return escalated

    async def terminate_workflow(self, instance_id: UUID, reason: str) -> WorkflowInstanceData:
        """Terminate a workflow that has not finished yet.

        Raises:
            WorkflowInstanceNotFoundError: If the instance does not exist.
            WorkflowAlreadyCompletedError: If the instance already finished.
        """
        instance = await self.get_instance(instance_id)
        async with self._locked(instance):
            if instance.is_finished:
                raise WorkflowAlreadyCompletedError(instance_id, instance.status)
            instance.status = WorkflowStatus.TERMINATED
            instance.error = f"Terminated: {reason}"
            instance.completed_at = self.clock()
            instance.assignee_group = None
        logger.info("Successfully terminated workflow: %s", instance_id)
        return instance

    async def get_instance(self, instance_id: UUID) -> WorkflowInstanceData:
        """Retrieve a workflow instance by ID.

        Raises:
            WorkflowInstanceNotFoundError: If the instance is not found.
        """
        try:
            return self._instances[instance_id]
        except KeyError:
            raise WorkflowInstanceNotFoundError(instance_id) from None

    def get_status(self, instance_id: UUID) -> WorkflowStatus | None:
        """Return the status of an instance, or None if it does not exist."""
        instance = self._instances.get(instance_id)
        return instance.status if instance else None

    def list_instances(self, status: WorkflowStatus | None = None) -> list[WorkflowInstanceData]:
        """List instances, optionally filtered by status."""
        return [instance for instance in self._instances.values() if status is None or instance.status == status]

    async def _assign(self, instance: WorkflowInstanceData) -> None:
        level = int(instance.context.get(ContextKey.APPROVAL_LEVEL, 1))
        instance.context.current_step = self.config.level_title(level)
        instance.assignee_group = await self._run_step(
            instance,
            "route",
            lambda inv: self.router.get_participant(instance.context, invocation_id=inv),
        )
        instance.status = WorkflowStatus.WAITING

    @asynccontextmanager
    async def _locked(self, instance: WorkflowInstanceData) -> AsyncIterator[None]:
        lock = self._locks[instance.id]
        try:
            async with lock:
                yield
        finally:
            if instance.is_finished and self._locks.get(instance.id) is lock:
                del self._locks[instance.id]

    async def _complete(self, instance: WorkflowInstanceData, terminal_step: str) -> None:
        instance.status = WorkflowStatus.RUNNING
        instance.assignee_group = None
        instance.context.current_step = terminal_step
        self._record_step(instance, terminal_step, StepStatus.SUCCEEDED)
        try:
            await self._run_step(instance, "finalize", lambda _inv: self.finalizer.finalize(instance.context))
        except StepExecutionError as e:
            instance.status = WorkflowStatus.FAILED
            instance.error = str(e)
            instance.completed_at = self.clock()
            logger.exception("Workflow %s could not be finalized", instance.id)
            return
        instance.status = WorkflowStatus.COMPLETED
        instance.completed_at = self.clock()
        logger.info(
            "Workflow %s completed: %s",
            instance.id,
            instance.context.get(ContextKey.WORKFLOW_OUTCOME),
        )

    async def _run_step(
        self,
        instance: WorkflowInstanceData,
        step_name: str,
        action: Callable[[str], Awaitable[T]],
        invocation_id: str | None = None,
    ) -> T:
        context = instance.context
        invocation_id = invocation_id or f"{step_name}:{uuid4().hex}"
        max_attempts = max(1, self.config.step_retry_attempts)
        started_at = self.clock()
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            snapshot = context.snapshot()
            try:
                result = await action(invocation_id)
            except InvalidDecisionError:
                context.restore(snapshot)
                raise
            except Exception as e:
                context.restore(snapshot)
                last_error = e
                logger.warning(
                    "Step %s of workflow %s failed (attempt %d/%d): %s",
                    step_name,
                    instance.id,
                    attempt,
                    max_attempts,
                    e,
                )
                continue
            self._record_step(instance, step_name, StepStatus.SUCCEEDED, started_at, attempt, invocation_id)
            return result

        self._record_step(
            instance,
            step_name,
            StepStatus.FAILED,
            started_at,
            max_attempts,
            invocation_id,
            error=str(last_error),
        )
        raise StepExecutionError(step_name, last_error) from last_error

    def _record_step(
        self,
        instance: WorkflowInstanceData,
        step_name: str,
        status: StepStatus,
        started_at: datetime | None = None,
        attempts: int = 1,
        invocation_id: str | None = None,
        error: str | None = None,
    ) -> None:
        now = self.clock()
        instance.context.step_history.append(
            StepExecution(
                step_name=step_name,
                status=status,
                started_at=started_at or now,
                completed_at=now,
                attempts=attempts,
                invocation_id=invocation_id,
                error=error,
            )
        )
