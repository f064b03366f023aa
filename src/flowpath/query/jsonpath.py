"""JSONPath evaluator backed by ``jsonpath-ng``.

Uses the extended grammar (``jsonpath_ng.ext``) so filters and
arithmetic are available. Compiled expressions are cached by text.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import TYPE_CHECKING, Any

from jsonpath_ng.ext import parse as jsonpath_parse

from flowpath.exceptions import EvalError
from flowpath.query.base import BaseEvaluator
from flowpath.types import Errored, Extracted, NotFound

if TYPE_CHECKING:
    from jsonpath_ng import JSONPath

    from flowpath.types import ParsedDocument, QueryResult

__all__ = ["JsonPathEvaluator", "coerce_value"]

logger = logging.getLogger(__name__)

_COMPILE_CACHE_SIZE = 256


@functools.lru_cache(maxsize=_COMPILE_CACHE_SIZE)
def _compile(expression: str) -> JSONPath:
    """Compile an expression, raising ``EvalError`` if it is malformed."""
    try:
        return jsonpath_parse(expression)
    except Exception as e:
        # lexer, parser and ply errors do not share a base class
        msg = f"Invalid JSONPath {expression!r}: {e}"
        raise EvalError(msg) from e


def _chained(error: EvalError, cause: BaseException) -> EvalError:
    error.__cause__ = cause
    return error


def coerce_value(value: Any) -> str:
    """Flatten one extracted JSON value to its string form.

    Strings are returned as-is, booleans and numbers use their JSON
    spelling, objects and arrays become compact JSON.

    Raises:
        EvalError: For ``null``, a non-finite number, a value that has no
            JSON representation, or text that cannot be encoded as UTF-8.
    """
    if value is None:
        msg = "Query matched a null value"
        raise EvalError(msg)
    if isinstance(value, str):
        text = value
    else:
        try:
            text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            msg = f"Cannot represent {type(value).__name__} value as a string: {e}"
            raise EvalError(msg) from e

    # lone surrogates survive json.loads but not content replacement
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        msg = f"Value is not valid UTF-8 text: {e}"
        raise EvalError(msg) from e
    return text


class JsonPathEvaluator(BaseEvaluator):
    """Evaluator for JSONPath expressions over JSON documents.

    A query must resolve to at most one node. Zero nodes is ``NotFound``;
    two or more is an ambiguous extraction and reported as ``Errored``.

    jsonpath-ng applies ``[*]`` to an object by yielding the object itself,
    so ``$.data[*]`` on ``{"data": {"a": 1}}`` extracts ``{"a":1}``. Use
    ``$.data.*`` to select an object's members instead.
    """

    def check(self, expression: str) -> None:
        _compile(expression)

    def evaluate(self, document: ParsedDocument, expression: str) -> QueryResult:
        try:
            compiled = _compile(expression)
        except EvalError as e:
            return Errored(cause=e)

        try:
            matches = compiled.find(document.root)
        except Exception as e:
            msg = f"JSONPath {expression!r} failed to evaluate: {e}"
            return Errored(cause=_chained(EvalError(msg), e))

        if not matches:
            return NotFound()

        if len(matches) > 1:
            paths = ", ".join(str(m.full_path) for m in matches[:3])
            msg = (
                f"JSONPath {expression!r} matched {len(matches)} nodes, "
                f"expected one (first: {paths})"
            )
            return Errored(cause=EvalError(msg))

        try:
            return Extracted(value=coerce_value(matches[0].value))
        except EvalError as e:
            return Errored(cause=_chained(EvalError(f"JSONPath {expression!r}: {e}"), e))
