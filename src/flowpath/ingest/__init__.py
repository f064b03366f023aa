"""Record content parsers."""

from flowpath.exceptions import ConfigurationError
from flowpath.ingest.base import BaseParser
from flowpath.ingest.jsondoc import JsonParser

__all__ = [
    "BaseParser",
    "JsonParser",
    "get_parser",
]

_PARSER_MAP: dict[str, type[BaseParser]] = {
    "json": JsonParser,
}


def get_parser(format_name: str) -> BaseParser:
    """Return a parser instance for the given document format.

    Args:
        format_name: Format identifier (e.g. ``"json"``).

    Returns:
        A new parser instance.

    Raises:
        ConfigurationError: If no parser is registered for the format.
    """
    cls = _PARSER_MAP.get(format_name)
    if cls is None:
        raise ConfigurationError(f"No parser for format: {format_name!r}")
    return cls()
