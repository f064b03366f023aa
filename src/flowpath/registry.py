"""Query registry for flowpath.

Holds the ordered, immutable set of ``name → expression`` bindings the
router evaluates against every record of a run.
Example: ``QueryRegistry([("name", "$.data.name")], OutputMode.ATTRIBUTE)``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowpath.exceptions import ConfigurationError
from flowpath.types import OutputMode, QueryBinding

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from flowpath.config import FlowpathConfig

__all__ = ["QueryRegistry"]

logger = logging.getLogger(__name__)


class QueryRegistry:
    """Validated, ordered query bindings plus the output mode they serve.

    Bindings are checked once at construction; a registry never changes
    afterwards. Build a new one to pick up configuration changes.

    Usage::

        registry = QueryRegistry(
            {"name": "$.data.name", "age": "$.data.age"},
            OutputMode.ATTRIBUTE,
        )
        for binding in registry:
            ...
    """

    __slots__ = ("_bindings", "_mode")

    def __init__(
        self,
        bindings: Mapping[str, str] | Iterable[tuple[str, str]],
        mode: OutputMode = OutputMode.CONTENT,
    ) -> None:
        """Validate and freeze the bindings.

        Args:
            bindings: Mapping or sequence of ``(name, expression)`` pairs,
                in evaluation order.
            mode: Output mode the bindings will be applied with.

        Raises:
            ConfigurationError: If a name is empty or repeated, an expression
                is empty, or content mode is given anything but one binding.
        """
        pairs = bindings.items() if hasattr(bindings, "items") else bindings
        try:
            mode = OutputMode(mode)
        except ValueError as e:
            raise ConfigurationError(f"Unknown output mode {mode!r}") from e

        seen: set[str] = set()
        frozen: list[QueryBinding] = []
        for name, expression in pairs:
            if not name or not name.strip():
                raise ConfigurationError("Query name must not be empty")
            if name in seen:
                raise ConfigurationError(f"Query name {name!r} is bound more than once")
            if not expression or not expression.strip():
                raise ConfigurationError(f"Query {name!r} has an empty expression")
            seen.add(name)
            frozen.append(QueryBinding(name=name, expression=expression.strip()))

        if mode is OutputMode.CONTENT and len(frozen) != 1:
            raise ConfigurationError(
                f"Destination 'content' requires exactly one query, got {len(frozen)}"
            )

        self._bindings: tuple[QueryBinding, ...] = tuple(frozen)
        self._mode = mode
        logger.debug("Registry built with %d queries (mode=%s)", len(frozen), mode.value)

    @classmethod
    def from_config(cls, config: FlowpathConfig) -> QueryRegistry:
        """Build a registry from the ``[router]`` and ``[queries]`` sections."""
        config.validate()
        return cls(config.queries, config.router.output_mode)

    @property
    def bindings(self) -> tuple[QueryBinding, ...]:
        return self._bindings

    @property
    def mode(self) -> OutputMode:
        return self._mode

    def names(self) -> list[str]:
        """Binding names in evaluation order."""
        return [b.name for b in self._bindings]

    def __iter__(self) -> Iterator[QueryBinding]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"QueryRegistry(mode={self._mode.value!r}, queries={self.names()!r})"
