"""Abstract base classes for record sources and sinks."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowpath.exceptions import EvalError, ParseError
    from flowpath.types import Outcome, Record

__all__ = ["BaseSink", "BaseSource"]

logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """Bounded-pull supplier of records."""

    @abstractmethod
    def pull(self, max_count: int) -> list[Record]:
        """Take up to ``max_count`` records.

        Args:
            max_count: Upper bound on the number of records returned.

        Returns:
            Records in source order. Empty when nothing is queued; never None.

        Raises:
            PipelineError: If the source cannot be read.
        """


class BaseSink(ABC):
    """Receiver of routed records, keyed by outcome."""

    @abstractmethod
    def dispatch(
        self,
        record: Record,
        outcome: Outcome,
        cause: ParseError | EvalError | None = None,
    ) -> None:
        """Hand a record off to the next stage.

        Args:
            record: The routed record; the sink owns it from here on.
            outcome: Relationship the record was routed to.
            cause: Failure reason, set only for ``Outcome.FAILED``.

        Raises:
            PipelineError: If the sink cannot accept the record.
        """
