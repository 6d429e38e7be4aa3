"""
Defines the abstract syntax tree (AST) node structure for the askl query language.

Classes:
    ASTNode:
        Base class for every node. Tracks the node kind and the source location of
        the node's first token, and freezes the node once it is constructed.

    Query:
        An ordered sequence of statements (the root, or the body of a scope).

    Statement:
        Zero or more verbs plus an optional nested scope.

    GenericVerb:
        `@name` with an optional `(key="value", ...)` argument list.

    NamedArgument:
        A single `key="value"` pair of a generic verb.

    Filter:
        A bare quoted string used as a verb.

    QueryDict, StatementDict, VerbDict, ArgumentDict:
        TypedDict shapes produced by `to_dict()`, suitable for JSON output.

Equality is structural: two nodes are equal when their kinds and contents are
equal, regardless of where in the source they were found. Inserting comments or
whitespace between tokens therefore never changes equality.

Example:
    Query([Statement([GenericVerb("a")], scope=Query([Statement([Filter("c")])]))])
"""

from collections.abc import Iterator
from typing import Any, TypedDict, Union


class ArgumentDict(TypedDict):
    kind: str
    name: str
    value: str
    line: int
    col: int
    offset: int


class VerbDict(TypedDict, total=False):
    """
    Serialized verb. Generic verbs carry `name` and `arguments`; filters carry
    `pattern`.
    """

    kind: str
    name: str
    arguments: list[ArgumentDict]
    pattern: str
    line: int
    col: int
    offset: int


class StatementDict(TypedDict):
    kind: str
    verbs: list[VerbDict]
    scope: Union["QueryDict", None]
    line: int
    col: int
    offset: int


class QueryDict(TypedDict):
    kind: str
    statements: list[StatementDict]
    line: int
    col: int
    offset: int


class ASTNode:
    """
    Common base for askl AST nodes.

    Args:
        line (int): Source line number of the node's first token (default 0).
        col (int): Source column number of the node's first token (default 0).
        offset (int): 0-based character offset of the node's first token (default 0).

    Attributes:
        kind (str): Node type name, also used by emitters for dispatch.
        line (int): Line number in the source query.
        col (int): Column number in the source query.
        offset (int): Character offset in the source query.

    Nodes are immutable: assigning an attribute after `__init__` has finished
    raises `AttributeError`.
    """

    kind = "node"
    _fields: tuple[str, ...] = ()

    def __init__(self, line: int = 0, col: int = 0, offset: int = 0):
        self.line = line
        self.col = col
        self.offset = offset
        self._frozen = True

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__name__} nodes are immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} nodes are immutable")

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return all(getattr(self, f) == getattr(other, f) for f in self._fields)

    def __hash__(self) -> int:
        return hash((self.kind,) + tuple(getattr(self, f) for f in self._fields))

    def __repr__(self) -> str:
        parts = ", ".join(f"{f}={getattr(self, f)!r}" for f in self._fields)
        return f"{type(self).__name__}({parts})"

    def location(self) -> dict[str, int]:
        return {"line": self.line, "col": self.col, "offset": self.offset}

    def to_dict(self) -> Any:  # pragma: no cover
        raise NotImplementedError


class NamedArgument(ASTNode):
    """A `name="value"` pair inside a generic verb's argument list."""

    kind = "argument"
    _fields = ("name", "value")

    def __init__(
        self, name: str, value: str, line: int = 0, col: int = 0, offset: int = 0
    ):
        self.name = name
        self.value = value
        super().__init__(line, col, offset)

    def to_dict(self) -> ArgumentDict:
        return {
            "kind": self.kind,
            "name": self.name,
            "value": self.value,
            **self.location(),  # type: ignore[typeddict-item]
        }


class GenericVerb(ASTNode):
    """
    A named verb, `@name` optionally followed by `(key="value", ...)`.

    Arguments keep their source order. Duplicate keys are kept as written; what
    a repeated key means is up to whoever consumes the AST.
    """

    kind = "generic_verb"
    _fields = ("name", "arguments")

    def __init__(
        self,
        name: str,
        arguments: list[NamedArgument] | tuple[NamedArgument, ...] = (),
        line: int = 0,
        col: int = 0,
        offset: int = 0,
    ):
        self.name = name
        self.arguments: tuple[NamedArgument, ...] = tuple(arguments)
        super().__init__(line, col, offset)

    def argument_pairs(self) -> list[tuple[str, str]]:
        """Returns the arguments as `(name, value)` tuples, in source order."""
        return [(a.name, a.value) for a in self.arguments]

    def to_dict(self) -> VerbDict:
        return {
            "kind": self.kind,
            "name": self.name,
            "arguments": [a.to_dict() for a in self.arguments],
            **self.location(),  # type: ignore[typeddict-item]
        }


class Filter(ASTNode):
    """A bare quoted string used as a verb; `pattern` may be empty."""

    kind = "filter"
    _fields = ("pattern",)

    def __init__(self, pattern: str, line: int = 0, col: int = 0, offset: int = 0):
        self.pattern = pattern
        super().__init__(line, col, offset)

    def to_dict(self) -> VerbDict:
        return {
            "kind": self.kind,
            "pattern": self.pattern,
            **self.location(),  # type: ignore[typeddict-item]
        }


Verb = Union[GenericVerb, Filter]


class Statement(ASTNode):
    """
    A run of verbs optionally followed by a scope.

    A statement with no verbs and no scope is valid and kept in the tree; it is
    what `;;` or a blank line produces.
    """

    kind = "statement"
    _fields = ("verbs", "scope")

    def __init__(
        self,
        verbs: list[Verb] | tuple[Verb, ...] = (),
        scope: Union["Query", None] = None,
        line: int = 0,
        col: int = 0,
        offset: int = 0,
    ):
        self.verbs: tuple[Verb, ...] = tuple(verbs)
        self.scope = scope
        super().__init__(line, col, offset)

    def is_empty(self) -> bool:
        return not self.verbs and self.scope is None

    def to_dict(self) -> StatementDict:
        return {
            "kind": self.kind,
            "verbs": [v.to_dict() for v in self.verbs],
            "scope": self.scope.to_dict() if self.scope is not None else None,
            **self.location(),  # type: ignore[typeddict-item]
        }


class Query(ASTNode):
    """An ordered sequence of statements: the whole query, or a scope body."""

    kind = "query"
    _fields = ("statements",)

    def __init__(
        self,
        statements: list[Statement] | tuple[Statement, ...] = (),
        line: int = 0,
        col: int = 0,
        offset: int = 0,
    ):
        self.statements: tuple[Statement, ...] = tuple(statements)
        super().__init__(line, col, offset)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def __getitem__(self, index: int) -> Statement:
        return self.statements[index]

    def to_dict(self) -> QueryDict:
        return {
            "kind": self.kind,
            "statements": [s.to_dict() for s in self.statements],
            **self.location(),  # type: ignore[typeddict-item]
        }


__all__ = [
    "ASTNode",
    "ArgumentDict",
    "Filter",
    "GenericVerb",
    "NamedArgument",
    "Query",
    "QueryDict",
    "Statement",
    "StatementDict",
    "Verb",
    "VerbDict",
]
