"""In-memory source and sink.

Used to embed the router in-process and by the CLI to collect results.
Both are safe to share between routers running on separate threads.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import TYPE_CHECKING

from flowpath.flow.base import BaseSink, BaseSource
from flowpath.types import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flowpath.exceptions import EvalError, ParseError
    from flowpath.types import Record

__all__ = ["MemorySink", "MemorySource"]

logger = logging.getLogger(__name__)


class MemorySource(BaseSource):
    """FIFO queue of records."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._queue: deque[Record] = deque(records)
        self._lock = threading.Lock()

    def enqueue(self, *records: Record) -> None:
        with self._lock:
            self._queue.extend(records)

    def pull(self, max_count: int) -> list[Record]:
        with self._lock:
            count = min(max_count, len(self._queue))
            return [self._queue.popleft() for _ in range(count)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)


class MemorySink(BaseSink):
    """Collects dispatched records per outcome, in dispatch order."""

    def __init__(self) -> None:
        self._records: dict[Outcome, list[Record]] = {outcome: [] for outcome in Outcome}
        self._causes: dict[str, ParseError | EvalError] = {}
        self._lock = threading.Lock()

    def dispatch(
        self,
        record: Record,
        outcome: Outcome,
        cause: ParseError | EvalError | None = None,
    ) -> None:
        with self._lock:
            self._records[outcome].append(record)
            if cause is not None:
                self._causes[record.record_id] = cause

    def records(self, outcome: Outcome) -> list[Record]:
        """Records routed to ``outcome`` so far."""
        with self._lock:
            return list(self._records[outcome])

    def cause(self, record: Record) -> ParseError | EvalError | None:
        """Failure reason recorded for a record, if it was routed to ``failed``."""
        with self._lock:
            return self._causes.get(record.record_id)

    def all(self) -> list[tuple[Outcome, Record]]:
        """Every dispatched record with its outcome."""
        with self._lock:
            return [(o, r) for o, records in self._records.items() for r in records]

    def __len__(self) -> int:
        with self._lock:
            return sum(len(records) for records in self._records.values())
