"""flowpath — JSONPath extraction and routing for record pipelines."""

__version__ = "0.1.0"
