"""File-backed record source.

Each file becomes one record whose content is the file's bytes.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from flowpath.exceptions import PipelineError
from flowpath.flow.base import BaseSource
from flowpath.types import Record

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

__all__ = ["FILENAME_ATTRIBUTE", "PATH_ATTRIBUTE", "FileSource"]

logger = logging.getLogger(__name__)

FILENAME_ATTRIBUTE = "filename"
PATH_ATTRIBUTE = "path"

MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50 MB


class FileSource(BaseSource):
    """Reads files lazily, one bounded pull at a time.

    Files are only opened when pulled, so a read error surfaces for the
    batch being pulled and never touches records already dispatched.
    """

    def __init__(self, paths: Iterable[Path]) -> None:
        self._pending: deque[Path] = deque(paths)

    def pull(self, max_count: int) -> list[Record]:
        taken: list[Path] = []
        records: list[Record] = []
        while self._pending and len(records) < max_count:
            path = self._pending.popleft()
            try:
                records.append(_read_record(path))
            except PipelineError:
                # Put back what this pull already read; the bad file is dropped.
                self._pending.extendleft(reversed(taken))
                raise
            taken.append(path)
        return records

    def __len__(self) -> int:
        return len(self._pending)


def _read_record(path: Path) -> Record:
    """Load a file into a record.

    Raises:
        PipelineError: If the file is missing, too large, or unreadable.
    """
    try:
        size = path.stat().st_size
        if size > MAX_FILE_SIZE:
            msg = f"{path.name} ({size} bytes) exceeds maximum size ({MAX_FILE_SIZE} bytes)"
            raise PipelineError(msg)
        content = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read {path}: {e}"
        raise PipelineError(msg) from e

    logger.debug("Read %s (%d bytes)", path, len(content))
    return Record(
        content=content,
        attributes={
            FILENAME_ATTRIBUTE: path.name,
            PATH_ATTRIBUTE: str(path.resolve()),
        },
    )
