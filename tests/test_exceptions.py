"""Tests for exception hierarchy."""

from __future__ import annotations

from uuid import uuid4

import pytest

from litestar_approvals.exceptions import (
    ApprovalsError,
    ContentStoreError,
    DecisionRecordingError,
    InvalidDecisionError,
    StepExecutionError,
    WorkflowAlreadyCompletedError,
    WorkflowInstanceNotFoundError,
)


@pytest.mark.unit
class TestApprovalsError:
    """Tests for base ApprovalsError exception."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            ContentStoreError,
            DecisionRecordingError,
            InvalidDecisionError,
            StepExecutionError,
            WorkflowAlreadyCompletedError,
            WorkflowInstanceNotFoundError,
        ],
    )
    def test_inherits_from_base(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, ApprovalsError)

    def test_can_be_raised(self) -> None:
        with pytest.raises(ApprovalsError, match="test"):
            raise ApprovalsError("test")


@pytest.mark.unit
class TestDecisionRecordingError:
    """Tests for DecisionRecordingError and InvalidDecisionError."""

    def test_message_includes_cause(self) -> None:
        cause = ContentStoreError("conflict")
        error = DecisionRecordingError("Decision recording failed", approver="alice", cause=cause)

        assert str(error) == "Decision recording failed: conflict"
        assert error.approver == "alice"
        assert error.cause is cause

    def test_without_cause(self) -> None:
        error = DecisionRecordingError("No approver identity available")

        assert str(error) == "No approver identity available"
        assert error.approver is None
        assert error.cause is None

    def test_invalid_decision(self) -> None:
        error = InvalidDecisionError("maybe", approver="bob")

        assert isinstance(error, DecisionRecordingError)
        assert error.decision == "maybe"
        assert error.approver == "bob"
        assert "maybe" in str(error)


@pytest.mark.unit
class TestRuntimeErrors:
    """Tests for runtime related exceptions."""

    def test_content_store_error(self) -> None:
        error = ContentStoreError("Commit failed", path="/content/site/hr/page")

        assert error.path == "/content/site/hr/page"
        assert str(error) == "Commit failed"

    def test_step_execution_error(self) -> None:
        cause = ValueError("boom")
        error = StepExecutionError("record_decision", cause)

        assert error.step_name == "record_decision"
        assert error.cause is cause
        assert str(error) == "Step 'record_decision' failed: boom"

    def test_instance_not_found_is_a_key_error(self) -> None:
        instance_id = uuid4()
        error = WorkflowInstanceNotFoundError(instance_id)

        assert isinstance(error, KeyError)
        assert error.instance_id == instance_id
        assert str(error) == f"Workflow instance '{instance_id}' not found"

    def test_already_completed(self) -> None:
        error = WorkflowAlreadyCompletedError("abc", "completed")

        assert error.status == "completed"
        assert "already completed" in str(error)
