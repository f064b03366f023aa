"""Abstract base class for document parsers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowpath.types import ParsedDocument

__all__ = ["BaseParser"]

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Base class for all record content parsers.

    Subclasses turn the full content of one record into a queryable
    ``ParsedDocument``. A parser holds no per-record state, so one
    instance can serve every record of a batch.
    """

    @abstractmethod
    def parse(self, content: bytes) -> ParsedDocument:
        """Parse record content into a document tree.

        Args:
            content: The record's complete content.

        Returns:
            ParsedDocument wrapping the root of the tree.

        Raises:
            ParseError: If the content is not a well-formed document.
        """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short name of the document format, e.g. ``"json"``."""
