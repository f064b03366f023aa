"""Abstract base class for query evaluators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowpath.types import ParsedDocument, QueryResult

__all__ = ["BaseEvaluator"]

logger = logging.getLogger(__name__)


class BaseEvaluator(ABC):
    """Base class for all path-query evaluators.

    ``evaluate`` reports every per-record problem through its return value.
    "Path absent" and "query broken" are different results and must never
    be folded into one.
    """

    @abstractmethod
    def evaluate(self, document: ParsedDocument, expression: str) -> QueryResult:
        """Evaluate one expression against one parsed document.

        Args:
            document: Tree produced by a parser for the current record.
            expression: Query expression text.

        Returns:
            ``Extracted`` with the value as a flat string, ``NotFound`` if
            the path is absent, or ``Errored`` if evaluation failed.
        """

    @abstractmethod
    def check(self, expression: str) -> None:
        """Validate an expression without a document.

        Raises:
            EvalError: If the expression is malformed.
        """
