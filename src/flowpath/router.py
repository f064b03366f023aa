"""Batch router for flowpath.

Composes source → parser → evaluator → classifier → sink via constructor
injection. Every pulled record is dispatched exactly once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowpath.classify import OutcomeClassifier
from flowpath.config import DEFAULT_BATCH_SIZE
from flowpath.exceptions import ConfigurationError, EvalError, ParseError, PipelineError
from flowpath.ingest import JsonParser, get_parser
from flowpath.query import JsonPathEvaluator, get_evaluator
from flowpath.registry import QueryRegistry
from flowpath.types import BatchReport, Failed, Matched, Outcome, OutputMode

if TYPE_CHECKING:
    from flowpath.config import FlowpathConfig
    from flowpath.flow.base import BaseSink, BaseSource
    from flowpath.ingest.base import BaseParser
    from flowpath.query.base import BaseEvaluator
    from flowpath.types import Record, RecordDisposition

__all__ = ["BatchRouter"]

logger = logging.getLogger(__name__)


class BatchRouter:
    """Routes bounded batches of records to matched / unmatched / failed.

    The registry, parser and evaluator are injected, so the router is
    testable with mock implementations. The router keeps no state between
    records, so one instance may serve concurrent ``run`` calls.

    Usage::

        router = BatchRouter(registry)
        report = router.run(source, sink)
        assert report.pulled == report.dispatched
    """

    def __init__(
        self,
        registry: QueryRegistry,
        parser: BaseParser | None = None,
        evaluator: BaseEvaluator | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {batch_size}")

        self.registry = registry
        self.parser = parser or JsonParser()
        self.evaluator = evaluator or JsonPathEvaluator()
        self.batch_size = batch_size
        self.classifier = OutcomeClassifier(registry, self.parser, self.evaluator)

    @classmethod
    def from_config(cls, config: FlowpathConfig) -> BatchRouter:
        """Build a router from the [router] and [queries] sections."""
        registry = QueryRegistry.from_config(config)
        return cls(
            registry,
            parser=get_parser(config.router.document_format),
            evaluator=get_evaluator(config.router.query_language),
            batch_size=config.router.batch_size,
        )

    @property
    def mode(self) -> OutputMode:
        return self.registry.mode

    def run(self, source: BaseSource, sink: BaseSink) -> BatchReport:
        """Pull one batch and route every record in it.

        Args:
            source: Where records are pulled from.
            sink: Where routed records are dispatched to.

        Returns:
            Counters for this batch. An empty pull returns an empty report.

        Raises:
            PipelineError: If the pull or a dispatch fails. Records dispatched
                before the failure stay dispatched.
        """
        try:
            records = source.pull(self.batch_size)
        except PipelineError:
            raise
        except Exception as e:
            raise PipelineError(f"Failed to pull records: {e}") from e

        report = BatchReport(pulled=len(records))
        if not records:
            return report

        for record in records:
            disposition = self.route(record)
            self._dispatch(sink, record, disposition)
            report.count(disposition.outcome)
            if isinstance(disposition, Failed):
                report.failures.append((record.record_id, disposition.cause))

        logger.info(
            "Routed %d records: %d matched, %d unmatched, %d failed",
            report.pulled,
            report.matched,
            report.unmatched,
            report.failed,
        )
        return report

    def run_until_empty(self, source: BaseSource, sink: BaseSink) -> BatchReport:
        """Run batches until the source returns an empty pull."""
        total = BatchReport()
        while True:
            report = self.run(source, sink)
            if report.pulled == 0:
                return total
            total.merge(report)

    def route(self, record: Record) -> RecordDisposition:
        """Classify one record and apply the output mode to it.

        Never raises for record-level problems; anything unexpected is
        turned into ``Failed`` so the batch sweep can continue.
        """
        try:
            disposition = self.classifier.classify(record.content)
            if isinstance(disposition, Matched):
                self._apply(record, disposition)
        except (ParseError, EvalError) as e:
            disposition = Failed(cause=e)
        except Exception as e:
            logger.exception("Unexpected error classifying %s", record)
            disposition = Failed(cause=_as_eval_error(e))

        if isinstance(disposition, Matched):
            logger.debug(
                "%s matched %d of %d queries; routing to %s",
                record,
                len(disposition.metadata),
                len(self.registry),
                Outcome.MATCHED.value,
            )
        elif isinstance(disposition, Failed):
            logger.error(
                "Unable to evaluate queries against %s due to %s; routing to %s",
                record,
                disposition.cause,
                Outcome.FAILED.value,
            )
        else:
            logger.debug("%s matched no queries; routing to %s", record, Outcome.UNMATCHED.value)

        return disposition

    def _apply(self, record: Record, disposition: Matched) -> None:
        """Write the extracted values into the record per the output mode.

        Raises:
            EvalError: If the extracted value cannot be written as content.
        """
        if self.mode is OutputMode.CONTENT:
            # content mode registries hold exactly one binding
            _, value = disposition.metadata[0]
            try:
                record.content = value.encode("utf-8")
            except UnicodeEncodeError as e:
                msg = f"Extracted value cannot be written as UTF-8 content: {e}"
                raise EvalError(msg) from e
        else:
            record.attributes.update(disposition.metadata)

    def _dispatch(self, sink: BaseSink, record: Record, disposition: RecordDisposition) -> None:
        cause = disposition.cause if isinstance(disposition, Failed) else None
        try:
            sink.dispatch(record, disposition.outcome, cause)
        except PipelineError:
            raise
        except Exception as e:
            raise PipelineError(
                f"Failed to dispatch {record} to {disposition.outcome.value}: {e}"
            ) from e


def _as_eval_error(error: Exception) -> EvalError:
    wrapped = EvalError(f"Unexpected error during evaluation: {error}")
    wrapped.__cause__ = error
    return wrapped
