"""Path-query evaluators."""

from flowpath.exceptions import ConfigurationError
from flowpath.query.base import BaseEvaluator
from flowpath.query.jsonpath import JsonPathEvaluator, coerce_value

__all__ = [
    "BaseEvaluator",
    "JsonPathEvaluator",
    "coerce_value",
    "get_evaluator",
]

_EVALUATOR_MAP: dict[str, type[BaseEvaluator]] = {
    "jsonpath": JsonPathEvaluator,
}


def get_evaluator(language: str) -> BaseEvaluator:
    """Return an evaluator instance for the given query language.

    Raises:
        ConfigurationError: If no evaluator is registered for the language.
    """
    cls = _EVALUATOR_MAP.get(language)
    if cls is None:
        raise ConfigurationError(f"No evaluator for query language: {language!r}")
    return cls()
