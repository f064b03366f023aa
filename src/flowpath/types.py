"""Data contracts for flowpath.

Records flow through the router as:
  Record → ParsedDocument → list[QueryResult] → RecordDisposition → sink
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from flowpath.exceptions import EvalError, ParseError

__all__ = [
    "BatchReport",
    "Errored",
    "Extracted",
    "Failed",
    "Matched",
    "NotFound",
    "Outcome",
    "OutputMode",
    "ParsedDocument",
    "QueryBinding",
    "QueryResult",
    "Record",
    "RecordDisposition",
    "Unmatched",
]


class Outcome(str, Enum):
    """Sink relationship a record is dispatched to."""

    MATCHED = "matched"
    UNMATCHED = "unmatched"
    FAILED = "failed"


class OutputMode(str, Enum):
    """Where extracted values are written on a match."""

    CONTENT = "content"
    ATTRIBUTE = "attribute"


@dataclass
class Record:
    """A unit of data owned by the surrounding pipeline.

    ``content`` is never mutated in place; content-replace swaps in a new
    ``bytes`` object. ``attributes`` is the record's mutable metadata.
    """

    content: bytes
    attributes: dict[str, str] = field(default_factory=dict)
    record_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __str__(self) -> str:
        return f"Record[{self.record_id}]"


@dataclass(frozen=True)
class QueryBinding:
    """A named query: ``name`` becomes the metadata key for its value."""

    name: str
    expression: str


@dataclass(frozen=True)
class ParsedDocument:
    """Queryable tree built from one record's content."""

    root: Any
    size: int = 0


# ── Per-query results ───────────────────────────────────────────────


@dataclass(frozen=True)
class Extracted:
    """The query yielded exactly one value, coerced to a string."""

    value: str


@dataclass(frozen=True)
class NotFound:
    """The query path is absent from this document."""


@dataclass(frozen=True)
class Errored:
    """The query could not be evaluated."""

    cause: EvalError


QueryResult = Extracted | NotFound | Errored


# ── Per-record dispositions ─────────────────────────────────────────


@dataclass(frozen=True)
class Matched:
    """At least one query yielded a value and none errored.

    ``metadata`` keeps registry order as ``(name, value)`` pairs.
    """

    metadata: tuple[tuple[str, str], ...]

    @property
    def outcome(self) -> Outcome:
        return Outcome.MATCHED


@dataclass(frozen=True)
class Unmatched:
    """Every query came back ``NotFound``."""

    @property
    def outcome(self) -> Outcome:
        return Outcome.UNMATCHED


@dataclass(frozen=True)
class Failed:
    """Parsing failed, or a query errored."""

    cause: ParseError | EvalError

    @property
    def outcome(self) -> Outcome:
        return Outcome.FAILED


RecordDisposition = Matched | Unmatched | Failed


@dataclass
class BatchReport:
    """Counters for one router sweep."""

    pulled: int = 0
    matched: int = 0
    unmatched: int = 0
    failed: int = 0
    failures: list[tuple[str, ParseError | EvalError]] = field(default_factory=list)

    @property
    def dispatched(self) -> int:
        return self.matched + self.unmatched + self.failed

    def count(self, outcome: Outcome) -> None:
        """Increment the counter for ``outcome``."""
        if outcome is Outcome.MATCHED:
            self.matched += 1
        elif outcome is Outcome.UNMATCHED:
            self.unmatched += 1
        else:
            self.failed += 1

    def merge(self, other: BatchReport) -> None:
        """Fold another report's counters into this one."""
        self.pulled += other.pulled
        self.matched += other.matched
        self.unmatched += other.unmatched
        self.failed += other.failed
        self.failures.extend(other.failures)
