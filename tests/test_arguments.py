"""Tests for step argument parsing."""

from __future__ import annotations

import logging

import pytest

from litestar_approvals.core.arguments import DecisionArguments, EscalationArguments, parse_process_args


@pytest.mark.unit
class TestParseProcessArgs:
    """Tests for the KEY:value argument string parser."""

    def test_parses_key_value_pairs(self) -> None:
        assert parse_process_args("DECISION:approve,COMMENTS:looks good") == {
            "DECISION": "approve",
            "COMMENTS": "looks good",
        }

    def test_empty_and_none(self) -> None:
        assert parse_process_args("") == {}
        assert parse_process_args(None) == {}

    def test_leading_whitespace_of_segments_is_ignored(self) -> None:
        assert parse_process_args("DECISION:reject, COMMENTS: too long ") == {
            "DECISION": "reject",
            "COMMENTS": "too long",
        }

    def test_first_occurrence_wins(self) -> None:
        assert parse_process_args("DECISION:reject,DECISION:approve") == {"DECISION": "reject"}

    def test_segments_without_key_are_ignored(self) -> None:
        assert parse_process_args("garbage,:value,DECISION:approve") == {"DECISION": "approve"}

    def test_value_may_contain_colons(self) -> None:
        assert parse_process_args("COMMENTS:see: section 2") == {"COMMENTS": "see: section 2"}

    def test_comma_in_comments_truncates(self) -> None:
        """Commas always separate segments, so comments end at the first comma."""
        assert parse_process_args("DECISION:approve,COMMENTS:good, but late")["COMMENTS"] == "good"


@pytest.mark.unit
class TestDecisionArguments:
    """Tests for DecisionArguments."""

    def test_from_process_args(self) -> None:
        arguments = DecisionArguments.from_process_args("DECISION:approve,COMMENTS:looks good")

        assert arguments.decision == "approve"
        assert arguments.comments == "looks good"
        assert arguments.is_approve
        assert not arguments.is_reject

    def test_defaults_when_absent(self) -> None:
        arguments = DecisionArguments.from_process_args("")

        assert arguments.decision == "unknown"
        assert arguments.comments == ""
        assert not arguments.is_recognized

    @pytest.mark.parametrize("decision", ["reject", "REJECT", "Reject"])
    def test_reject_is_case_insensitive(self, decision: str) -> None:
        arguments = DecisionArguments(decision=decision)

        assert arguments.is_reject
        assert arguments.is_recognized

    def test_arguments_are_frozen(self) -> None:
        from dataclasses import FrozenInstanceError

        arguments = DecisionArguments(decision="approve")
        with pytest.raises(FrozenInstanceError):
            arguments.decision = "reject"  # type: ignore[misc]


@pytest.mark.unit
class TestEscalationArguments:
    """Tests for EscalationArguments."""

    def test_threshold_override(self) -> None:
        arguments = EscalationArguments.from_process_args("THRESHOLD_HOURS:24")

        assert arguments.threshold_hours == 24
        assert arguments.resolve(48) == 24

    def test_missing_threshold_uses_default(self) -> None:
        arguments = EscalationArguments.from_process_args("")

        assert arguments.threshold_hours is None
        assert arguments.resolve(48) == 48

    def test_zero_threshold_is_kept(self) -> None:
        assert EscalationArguments.from_process_args("THRESHOLD_HOURS:0").resolve(48) == 0

    @pytest.mark.parametrize("raw", ["THRESHOLD_HOURS:abc", "THRESHOLD_HOURS:", "THRESHOLD_HOURS:-5"])
    def test_malformed_threshold_falls_back(self, raw: str, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="litestar_approvals.core.arguments"):
            arguments = EscalationArguments.from_process_args(raw)

        assert arguments.resolve(48) == 48
        assert caplog.records
