"""
Emits an indented, human-readable tree view of an askl AST.

Each node is written on its own line with its source position, children indented
one level deeper. For `@a(seconds="30") { "c" }`:

    query @1:1
      statement @1:1
        verb @a @1:1
          arg seconds="30" @1:4
        scope @1:18
          statement @1:20
            filter "c" @1:20

Meant for eyeballing parser output; the format is not parsed back.
"""

from askl.askl_ast import ASTNode, Filter, GenericVerb, NamedArgument, Query, Statement


class TreeEmitter:
    """Emits a tree dump from AST nodes.

    Attributes:
        lines (list[str]): Accumulated output lines.
        indent (int): Current indentation level.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return "  " * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def _line(self, text: str, node: ASTNode) -> None:
        self.lines.append(f"{self.indent_str()}{text} @{node.line}:{node.col}")

    def emit_argument(self, node: NamedArgument) -> None:
        self._line(f'arg {node.name}="{node.value}"', node)

    def emit_generic_verb(self, node: GenericVerb) -> None:
        self._line(f"verb @{node.name}", node)
        self.indent += 1
        for arg in node.arguments:
            self.emit_argument(arg)
        self.indent -= 1

    def emit_filter(self, node: Filter) -> None:
        self._line(f'filter "{node.pattern}"', node)

    def emit_statement(self, node: Statement) -> None:
        self._line("statement" if not node.is_empty() else "statement (empty)", node)
        self.indent += 1
        for verb in node.verbs:
            self._visit(verb)
        if node.scope is not None:
            self._line("scope", node.scope)
            self.indent += 1
            for stmt in node.scope.statements:
                self.emit_statement(stmt)
            self.indent -= 1
        self.indent -= 1

    def emit_query(self, node: Query) -> None:
        self._line("query", node)
        self.indent += 1
        for stmt in node.statements:
            self.emit_statement(stmt)
        self.indent -= 1

    def _visit(self, node: ASTNode) -> None:
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No tree emitter for node kind '{node.kind}'")
        method(node)
