"""
Provides the `Formatter` class and emitter interface for turning askl ASTs into text.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `__init__`,
      `emit_query` and `get_output`.
    - AsklEmitter: Canonical askl text; re-parsing it yields an equal AST.
    - TreeEmitter: Indented tree view with source positions.
    - Formatter: Picks the emitter for a style name and feeds it queries.

Example:
    >>> Formatter("askl").format(parse_query('@a  /* x */ "b"'))
    '@a "b"'

Raises:
    ValueError: If the style is not supported.
    TypeError: If something other than a `Query` is passed in.
"""

from typing import Protocol

from askl.askl_ast import Query
from askl.emitters.askl_emitter import AsklEmitter
from askl.emitters.tree_emitter import TreeEmitter


class Emitter(Protocol):  # pragma: no cover
    """Protocol for askl output emitters."""

    def __init__(self) -> None: ...  # pragma: no cover

    def emit_query(self, node: Query) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""

emitters: dict[str, EmitterType] = {
    "askl": AsklEmitter,
    "tree": TreeEmitter,
}


class Formatter:
    """Dispatches a parsed query to the emitter for the requested style.

    Attributes:
        emitter (Emitter): The emitter instance for the selected style.
    """

    def __init__(self, style: str = "askl") -> None:
        """Initializes the formatter.

        Args:
            style: Output style name ("askl" or "tree").

        Raises:
            ValueError: If the style is not supported.
        """
        style = style.lower()
        if style not in emitters:
            raise ValueError(f"Unknown output style: {style!r}")
        self.style = style
        self.emitter: Emitter = emitters[style]()

    def format(self, query: Query) -> str:
        """Formats a query with the selected emitter.

        Raises:
            TypeError: If `query` is not a `Query` node.
        """
        if not isinstance(query, Query):
            raise TypeError("Formatter expects a Query node.")
        self.emitter.emit_query(query)
        return self.emitter.get_output()


def format_query(query: Query, style: str = "askl") -> str:
    """Formats `query` in `style` using a fresh `Formatter`."""
    return Formatter(style).format(query)


__all__ = ["Emitter", "Formatter", "emitters", "format_query"]
