"""Tests for flowpath.types module — data contracts."""

from __future__ import annotations

import dataclasses

import pytest

from flowpath.exceptions import EvalError, ParseError
from flowpath.types import (
    BatchReport,
    Errored,
    Extracted,
    Failed,
    Matched,
    NotFound,
    Outcome,
    OutputMode,
    QueryBinding,
    Record,
    Unmatched,
)


class TestRecord:
    def test_defaults(self):
        record = Record(content=b"{}")
        assert record.attributes == {}
        assert record.record_id

    def test_record_ids_are_unique(self):
        assert Record(content=b"").record_id != Record(content=b"").record_id

    def test_attributes_are_mutable(self):
        record = Record(content=b"{}")
        record.attributes["k"] = "v"
        assert record.attributes == {"k": "v"}

    def test_attributes_not_shared_between_records(self):
        a = Record(content=b"")
        b = Record(content=b"")
        a.attributes["k"] = "v"
        assert b.attributes == {}

    def test_str_includes_id(self):
        record = Record(content=b"", record_id="abc")
        assert str(record) == "Record[abc]"


class TestQueryBinding:
    def test_frozen(self):
        binding = QueryBinding(name="name", expression="$.name")
        with pytest.raises(dataclasses.FrozenInstanceError):
            binding.name = "changed"  # type: ignore[misc]


class TestQueryResults:
    def test_extracted_holds_value(self):
        assert Extracted(value="32").value == "32"

    def test_not_found_instances_are_equal(self):
        assert NotFound() == NotFound()

    def test_errored_holds_cause(self):
        cause = EvalError("boom")
        assert Errored(cause=cause).cause is cause


class TestDispositions:
    def test_outcomes(self):
        assert Matched(metadata=(("a", "1"),)).outcome is Outcome.MATCHED
        assert Unmatched().outcome is Outcome.UNMATCHED
        assert Failed(cause=ParseError("bad")).outcome is Outcome.FAILED

    def test_matched_keeps_order(self):
        matched = Matched(metadata=(("b", "2"), ("a", "1")))
        assert [k for k, _ in matched.metadata] == ["b", "a"]


class TestEnums:
    def test_outcome_values(self):
        assert [o.value for o in Outcome] == ["matched", "unmatched", "failed"]

    def test_output_mode_from_string(self):
        assert OutputMode("attribute") is OutputMode.ATTRIBUTE
        assert OutputMode("content") is OutputMode.CONTENT


class TestBatchReport:
    def test_count_and_dispatched(self):
        report = BatchReport(pulled=3)
        report.count(Outcome.MATCHED)
        report.count(Outcome.UNMATCHED)
        report.count(Outcome.FAILED)
        assert (report.matched, report.unmatched, report.failed) == (1, 1, 1)
        assert report.dispatched == 3

    def test_merge(self):
        total = BatchReport(pulled=2, matched=2)
        err = ParseError("bad")
        total.merge(BatchReport(pulled=1, failed=1, failures=[("r1", err)]))
        assert total.pulled == 3
        assert total.dispatched == 3
        assert total.failures == [("r1", err)]
