"""JSON document parser.

Decodes the whole record content as UTF-8 JSON. Anything short of one
complete, standard JSON value is rejected; there is no partial document.
"""

from __future__ import annotations

import json
import logging
import math

from flowpath.exceptions import ParseError
from flowpath.ingest.base import BaseParser
from flowpath.types import ParsedDocument

__all__ = ["JsonParser"]

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"number {text} is out of range")
    return number


class JsonParser(BaseParser):
    """Parser for JSON record content."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    @property
    def format_name(self) -> str:
        return "json"

    def parse(self, content: bytes) -> ParsedDocument:
        """Parse JSON content into a ``ParsedDocument``.

        Raises:
            ParseError: On undecodable bytes, empty content, trailing data,
                ``NaN``/``Infinity`` constants, numbers that overflow
                to infinity, or any other JSON syntax error.
        """
        try:
            text = content.decode(self.encoding)
        except UnicodeDecodeError as e:
            msg = f"Content is not valid {self.encoding}: {e}"
            raise ParseError(msg) from e

        # Strip BOM if present
        if text.startswith("\ufeff"):
            text = text[1:]

        if not text.strip():
            msg = "Content is empty"
            raise ParseError(msg)

        try:
            root = json.loads(
                text, parse_constant=_reject_constant, parse_float=_parse_finite_float
            )
        except (json.JSONDecodeError, ValueError, RecursionError) as e:
            msg = f"Content is not well-formed JSON: {e}"
            raise ParseError(msg) from e

        logger.debug("Parsed %d bytes of JSON (root=%s)", len(content), type(root).__name__)
        return ParsedDocument(root=root, size=len(content))
