"""REST API controller for approval workflows.

This module provides the ApprovalController for starting approval workflows,
submitting decisions, polling escalations and inspecting the audit trail.
"""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from litestar import Controller, get, post
from litestar.exceptions import ClientException, HTTPException, NotFoundException
from litestar.params import Parameter
from litestar.status_codes import HTTP_200_OK, HTTP_409_CONFLICT, HTTP_503_SERVICE_UNAVAILABLE

from litestar_approvals.core.arguments import EscalationArguments
from litestar_approvals.core.types import WorkflowStatus
from litestar_approvals.engine.local import LocalApprovalEngine  # noqa: TC001 - needed for DI
from litestar_approvals.exceptions import (
    InvalidDecisionError,
    StepExecutionError,
    WorkflowAlreadyCompletedError,
    WorkflowInstanceNotFoundError,
)
from litestar_approvals.web.dto import (
    ApprovalInstanceDetailDTO,
    ApprovalInstanceDTO,
    DecisionDTO,
    StartApprovalDTO,
    TerminateDTO,
)

__all__ = ["ApprovalController"]


class ApprovalController(Controller):
    """API controller for approval workflow instances.

    Tags: Approvals
    """

    path = "/"
    tags: ClassVar[list[str]] = ["Approvals"]

    @post("/", dto=None, return_dto=None)
    async def start_approval(
        self,
        data: StartApprovalDTO,
        approval_engine: LocalApprovalEngine,
    ) -> ApprovalInstanceDTO:
        """Start an approval workflow for a content item.

        Args:
            data: Workflow start parameters.
            approval_engine: Injected approval runtime.

        Returns:
            The started instance, assigned to its first approver group.
        """
        instance = await approval_engine.start_workflow(
            data.payload,
            initiator=data.initiator,
            metadata=data.metadata,
        )
        return ApprovalInstanceDTO.from_instance(instance)

    @get("/")
    async def list_approvals(
        self,
        approval_engine: LocalApprovalEngine,
        status: str | None = Parameter(
            default=None,
            description="Filter by status",
        ),
    ) -> list[ApprovalInstanceDTO]:
        """List approval workflows with an optional status filter.

        Raises:
            ClientException: If the status is unknown.
        """
        try:
            workflow_status = WorkflowStatus(status) if status else None
        except ValueError as e:
            raise ClientException(detail=f"Unknown status: {status}") from e
        return [ApprovalInstanceDTO.from_instance(i) for i in approval_engine.list_instances(workflow_status)]

    @get("/{instance_id:uuid}")
    async def get_approval(
        self,
        instance_id: UUID,
        approval_engine: LocalApprovalEngine,
    ) -> ApprovalInstanceDetailDTO:
        """Get an approval workflow with its audit history.

        Raises:
            NotFoundException: If the instance is not found.
        """
        try:
            instance = await approval_engine.get_instance(instance_id)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        return ApprovalInstanceDetailDTO.from_instance(instance)

    @post("/{instance_id:uuid}/decisions", status_code=HTTP_200_OK)
    async def submit_decision(
        self,
        instance_id: UUID,
        data: DecisionDTO,
        approval_engine: LocalApprovalEngine,
    ) -> ApprovalInstanceDetailDTO:
        """Submit an approve/reject decision for the pending level.

        Raises:
            NotFoundException: If the instance is not found.
            HTTPException: 409 if the workflow is not waiting for a decision,
                503 if the decision could not be recorded.
            ClientException: If strict decisions are enabled and the decision is invalid.
        """
        try:
            instance = await approval_engine.submit_decision(
                instance_id,
                approver=data.approver,
                decision=data.decision,
                comments=data.comments,
                invocation_id=data.invocation_id,
            )
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        except WorkflowAlreadyCompletedError as e:
            raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e
        except InvalidDecisionError as e:
            raise ClientException(detail=str(e)) from e
        except StepExecutionError as e:
            raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
        return ApprovalInstanceDetailDTO.from_instance(instance)

    @post("/{instance_id:uuid}/terminate", status_code=HTTP_200_OK)
    async def terminate_approval(
        self,
        instance_id: UUID,
        data: TerminateDTO,
        approval_engine: LocalApprovalEngine,
    ) -> ApprovalInstanceDTO:
        """Terminate an approval workflow that has not finished.

        Raises:
            NotFoundException: If the instance is not found.
            HTTPException: 409 if the workflow already finished.
        """
        try:
            instance = await approval_engine.terminate_workflow(instance_id, data.reason)
        except WorkflowInstanceNotFoundError as e:
            raise NotFoundException(detail=str(e)) from e
        except WorkflowAlreadyCompletedError as e:
            raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e
        return ApprovalInstanceDTO.from_instance(instance)

    @post("/escalations/poll", status_code=HTTP_200_OK)
    async def poll_escalations(
        self,
        approval_engine: LocalApprovalEngine,
        threshold_hours: int | None = Parameter(
            default=None,
            ge=0,
            description="Override of the escalation threshold for this poll",
        ),
    ) -> list[ApprovalInstanceDTO]:
        """Run the escalation monitor over all waiting workflows.

        Returns:
            The workflows escalated by this poll.
        """
        escalated = await approval_engine.poll_escalations(EscalationArguments(threshold_hours=threshold_hours))
        return [ApprovalInstanceDTO.from_instance(i) for i in escalated]
