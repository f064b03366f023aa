"""Outcome classification for a single record.

Parses the record once, evaluates the registry's bindings in order and
folds the results into one ``RecordDisposition``:

- parse failure → ``Failed``, no query is run
- ``Errored`` → ``Failed``, later bindings are not evaluated
- ``NotFound`` → skipped
- ``Extracted`` → collected; any collected value makes the record ``Matched``
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowpath.exceptions import ParseError
from flowpath.types import Errored, Extracted, Failed, Matched, Unmatched

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from flowpath.ingest.base import BaseParser
    from flowpath.query.base import BaseEvaluator
    from flowpath.registry import QueryRegistry
    from flowpath.types import ParsedDocument, QueryResult, RecordDisposition

__all__ = ["OutcomeClassifier", "evaluate_bindings", "fold_results"]

logger = logging.getLogger(__name__)


def evaluate_bindings(
    document: ParsedDocument,
    registry: QueryRegistry,
    evaluator: BaseEvaluator,
) -> Iterator[tuple[str, QueryResult]]:
    """Lazily evaluate each binding in registry order.

    Nothing is evaluated until the consumer asks for the next result, so a
    consumer that stops early leaves the remaining bindings untouched.
    """
    for binding in registry:
        yield binding.name, evaluator.evaluate(document, binding.expression)


def fold_results(results: Iterable[tuple[str, QueryResult]]) -> RecordDisposition:
    """Fold ``(name, result)`` pairs into a record disposition.

    Stops consuming ``results`` at the first ``Errored``.
    """
    metadata: list[tuple[str, str]] = []
    for name, result in results:
        if isinstance(result, Errored):
            logger.debug("Query %r errored: %s", name, result.cause)
            return Failed(cause=result.cause)
        if isinstance(result, Extracted):
            metadata.append((name, result.value))

    if metadata:
        return Matched(metadata=tuple(metadata))
    return Unmatched()


class OutcomeClassifier:
    """Classifies record content against a fixed registry.

    Holds no per-record state; the parsed document lives only for the
    duration of one ``classify`` call.

    Usage::

        classifier = OutcomeClassifier(registry, JsonParser(), JsonPathEvaluator())
        disposition = classifier.classify(record.content)
    """

    def __init__(
        self,
        registry: QueryRegistry,
        parser: BaseParser,
        evaluator: BaseEvaluator,
    ) -> None:
        self.registry = registry
        self.parser = parser
        self.evaluator = evaluator

    def classify(self, content: bytes) -> RecordDisposition:
        """Parse ``content`` and classify it against every binding."""
        try:
            document = self.parser.parse(content)
        except ParseError as e:
            return Failed(cause=e)

        return fold_results(evaluate_bindings(document, self.registry, self.evaluator))
