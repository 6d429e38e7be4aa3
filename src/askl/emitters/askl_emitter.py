"""
Emits canonical askl text from an askl AST.

This module defines the `AsklEmitter` class, which turns a parsed `Query` back into
compact, single-line query text. The output is the canonical spelling of the query:

    - Statements are joined with `"; "`.
    - Verbs are separated by one space.
    - Generic verbs are written `@name` or `@name(key="value", ...)`.
    - Filters are written `"pattern"`.
    - Scopes are written `{ ... }`, or `{}` when the body is a single empty statement.

Parsing the emitted text yields a `Query` equal to the one emitted, argument
order included. Comments and the original whitespace are not preserved.
"""

from askl.askl_ast import ASTNode, Filter, GenericVerb, NamedArgument, Query, Statement


class AsklEmitter:
    """Emits askl source text from AST nodes.

    Attributes:
        lines (list[str]): Emitted top-level queries, one per `emit_query` call.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def emit_argument(self, node: NamedArgument) -> str:
        return f'{node.name}="{node.value}"'

    def emit_generic_verb(self, node: GenericVerb) -> str:
        if not node.arguments:
            return f"@{node.name}"
        args = ", ".join(self.emit_argument(a) for a in node.arguments)
        return f"@{node.name}({args})"

    def emit_filter(self, node: Filter) -> str:
        return f'"{node.pattern}"'

    def emit_scope(self, node: Query) -> str:
        body = self.emit_statements(node)
        return f"{{ {body} }}" if body else "{}"

    def emit_statement(self, node: Statement) -> str:
        parts = [self._visit(v) for v in node.verbs]
        if node.scope is not None:
            parts.append(self.emit_scope(node.scope))
        return " ".join(parts)

    def emit_statements(self, node: Query) -> str:
        return "; ".join(self.emit_statement(s) for s in node.statements)

    def emit_query(self, node: Query) -> None:
        """Appends the text of a top-level query to the output buffer."""
        self.lines.append(self.emit_statements(node))

    def _visit(self, node: ASTNode) -> str:
        """
        Dispatches a verb or argument node to its emit method.

        Raises
        ------
        NotImplementedError
            If no emitter is defined for the node kind.
        """
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No askl emitter for node kind '{node.kind}'")
        return method(node)  # type: ignore[no-any-return]
