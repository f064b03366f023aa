"""Custom exception hierarchy for flowpath."""

__all__ = [
    "ConfigurationError",
    "EvalError",
    "FlowpathError",
    "ParseError",
    "PipelineError",
]


class FlowpathError(Exception):
    """Base exception for all flowpath errors."""


class ConfigurationError(FlowpathError):
    """Raised when configuration loading or registry validation fails."""


class ParseError(FlowpathError):
    """Raised when record content cannot be parsed into a document."""


class EvalError(FlowpathError):
    """Raised when a query cannot be evaluated against a parsed document."""


class PipelineError(FlowpathError):
    """Raised when pulling from a source or dispatching to a sink fails."""
