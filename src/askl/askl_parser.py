"""
askl Query Parser

Parses askl query text into a `Query` abstract syntax tree.

This module implements a hand-written recursive-descent parser for the grammar
below. Nested scopes are tracked on an explicit stack, so any nesting depth parses:

    ask            = statements EOF
    statements     = statement (terminator statement)*
    terminator     = ";" | NEWLINE
    statement      = verb* scope?
    scope          = "{" statements "}"
    verb           = generic_verb | plain_filter
    generic_verb   = "@" ident ("(" named_argument ("," named_argument)* ")")?
    named_argument = ident "=" quoted_string
    plain_filter   = quoted_string

Tokens are pulled from the `Lexer` on demand, so the first error in source order is
the one reported, whether the scanner or the parser detects it.

Parser Behavior
---------------
- A statement may be empty: `;;` is three empty statements.
- The verb loop stops at the first token that cannot start a verb; that is not an
  error by itself.
- `@` verbs are recognized before bare strings; a bare string is only ever a filter.
- Newlines inside an unclosed `(` are skipped rather than treated as terminators.
- Fails fast: the first error aborts the parse.

Entry Points
------------
- `parse_query(source)`: Parse a full query string.
- `Parser.parse()`: Parse the whole token stream of a `Lexer`.

Raises
------
AsklSyntaxError
    `InvalidIdentifier`, `UnterminatedString`, `UnterminatedComment`,
    `MalformedArguments`, `UnclosedScope` or `UnexpectedTrailingInput`.
"""

from __future__ import annotations

import logging

from askl.askl_ast import Filter, GenericVerb, NamedArgument, Query, Statement, Verb
from askl.askl_constants import terminator_tokens, token_display
from askl.askl_errors import (
    AsklSyntaxError,
    InvalidIdentifier,
    MalformedArguments,
    UnclosedScope,
    UnexpectedTrailingInput,
)
from askl.askl_lexer import CharacterStream, Lexer, Token

logger = logging.getLogger(__name__)


def describe(tok: Token) -> str:
    """Returns a short human-readable description of a token for diagnostics."""
    if tok.type in ("IDENT", "ERROR"):
        return repr(tok.value)
    if tok.type == "STRING":
        return f'"{tok.value}"'
    return token_display.get(tok.type, tok.type)


class ScopeFrame:
    """
    A statement list being parsed: the whole query, or an open `{ ... }` scope.

    `open_tok` is the `{` (None at top level). `owner` is the first token of the
    statement that the scope belongs to, and `verbs` are that statement's verbs.
    """

    def __init__(
        self, open_tok: Token | None, owner: Token, verbs: list[Verb] | None = None
    ) -> None:
        self.open_tok = open_tok
        self.owner = owner
        self.verbs: list[Verb] = verbs or []
        self.statements: list[Statement] = []

    def query(self) -> Query:
        tok = self.owner if self.open_tok is None else self.open_tok
        return Query(self.statements, line=tok.line, col=tok.col, offset=tok.offset)


class Parser:
    """
    askl Parser Class

    Responsible for turning the tokens produced by a `Lexer` into a `Query`.

    Attributes
    ----------
    lexer : Lexer
        Token source; tokens are requested one at a time as the parser needs them.
    tokens : list[Token]
        Tokens read so far.
    position : int
        Index of the current token in `tokens`.
    depth : int
        Number of `{ ... }` scopes currently open.

    Methods
    -------
    parse() -> Query
        Parse a complete query; input left over is an error.
    parse_statements() -> Query
        Parse terminator-separated statements and any nested scopes.
    parse_verbs() -> list[Verb]
        Parse the run of verbs that starts a statement.
    open_scope(owner, verbs) -> ScopeFrame
        Consume a `{` and start a new statement list.
    close_scope(frame) -> Statement
        Consume the matching `}` and build the statement owning the scope.
    parse_verb() -> Verb | None
        Parse one verb, or return None if none starts here.
    parse_generic_verb() -> GenericVerb
        Parse `@name` and its optional argument list.
    parse_arguments() -> list[NamedArgument]
        Parse a parenthesised `key="value"` list.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.tokens: list[Token] = []
        self.position: int = 0
        self.depth: int = 0

    @property
    def source(self) -> str:
        return self.lexer.stream.source

    def current(self) -> Token:
        while self.position >= len(self.tokens):
            if self.tokens and self.tokens[-1].type == "EOF":
                return self.tokens[-1]
            self.tokens.append(self.lexer.next_token())
        return self.tokens[self.position]

    def advance(self) -> Token:
        tok = self.current()
        if tok.type != "EOF":
            self.position += 1
        return tok

    def match(self, *types: str) -> Token | None:
        """Consumes and returns the current token if its type is in `types`."""
        tok = self.current()
        if tok.type in types:
            return self.advance()
        return None

    def skip_newlines(self) -> None:
        while self.current().type == "NEWLINE":
            self.advance()

    def error(
        self,
        cls: type[AsklSyntaxError],
        message: str,
        tok: Token,
        expected: str | None = None,
    ) -> AsklSyntaxError:
        """Builds an error of type `cls` located at `tok`."""
        err = cls(
            message,
            tok.offset,
            tok.line,
            tok.col,
            expected=expected,
            found=describe(tok),
            source=self.source,
        )
        logger.debug("parse failed: %s", err)
        return err

    def parse(self) -> Query:
        """Parse a full askl query and return its root `Query`."""
        logger.debug("parsing query of %d characters", len(self.source))
        query = self.parse_statements()
        tok = self.current()
        if tok.type != "EOF":
            if tok.type == "RBRACE":
                message = "Unmatched '}' with no open scope"
            else:
                message = f"Unexpected {describe(tok)} after end of query"
            raise self.error(
                UnexpectedTrailingInput, message, tok, expected="end of input"
            )
        logger.debug("parsed %d top-level statements", len(query.statements))
        return query

    def parse_statements(self) -> Query:
        """Parse `statement (terminator statement)*`, including nested scopes.

        Open scopes are kept on an explicit stack of `ScopeFrame`s instead of
        the call stack, so nesting depth is not limited by the interpreter's
        recursion limit.
        """
        stack = [ScopeFrame(None, self.current())]
        while True:
            frame = stack[-1]
            first = self.current()
            verbs = self.parse_verbs()
            if self.current().type == "LBRACE":
                stack.append(self.open_scope(first, verbs))
                continue

            statement = Statement(
                verbs, None, line=first.line, col=first.col, offset=first.offset
            )
            # a closed scope completes the statement that owns it, which may
            # in turn be the last statement of its enclosing scope
            while True:
                frame.statements.append(statement)
                if self.match(*terminator_tokens) is not None:
                    break
                if frame.open_tok is None:
                    return frame.query()
                statement = self.close_scope(frame)
                stack.pop()
                frame = stack[-1]

    def parse_verbs(self) -> list[Verb]:
        """Parse `verb*`. Stops at the first token that cannot start a verb."""
        verbs: list[Verb] = []
        while True:
            verb = self.parse_verb()
            if verb is None:
                return verbs
            verbs.append(verb)

    def open_scope(self, owner: Token, verbs: list[Verb]) -> ScopeFrame:
        open_tok = self.match("LBRACE")
        assert open_tok is not None  # for mypy

        self.depth += 1
        logger.debug(
            "entering scope at line %d, col %d (depth %d)",
            open_tok.line,
            open_tok.col,
            self.depth,
        )
        return ScopeFrame(open_tok, owner, verbs)

    def close_scope(self, frame: ScopeFrame) -> Statement:
        """Consume the `}` of `frame` and return the statement owning the scope."""
        open_tok = frame.open_tok
        assert open_tok is not None  # for mypy

        tok = self.current()
        if tok.type != "RBRACE":
            if tok.type == "EOF":
                message = (
                    f"Scope opened at line {open_tok.line}, col {open_tok.col} "
                    "is never closed"
                )
            else:
                message = (
                    f"Expected '}}' to close scope opened at line {open_tok.line}, "
                    f"col {open_tok.col}"
                )
            raise self.error(UnclosedScope, message, tok, expected="'}'")
        self.advance()
        self.depth -= 1
        owner = frame.owner
        return Statement(
            frame.verbs,
            frame.query(),
            line=owner.line,
            col=owner.col,
            offset=owner.offset,
        )

    def parse_verb(self) -> Verb | None:
        """Parse a generic verb or a plain filter; None if neither starts here."""
        tok = self.current()
        if tok.type == "AT":
            return self.parse_generic_verb()
        if tok.type == "STRING":
            self.advance()
            return Filter(tok.value, line=tok.line, col=tok.col, offset=tok.offset)
        return None

    def parse_generic_verb(self) -> GenericVerb:
        """Parse `"@" ident ("(" arguments ")")?`."""
        at_tok = self.match("AT")
        assert at_tok is not None  # for mypy

        name_tok = self.current()
        if name_tok.type != "IDENT":
            raise self.error(
                InvalidIdentifier,
                "Expected a verb name after '@'",
                name_tok,
                expected="identifier",
            )
        self.advance()

        arguments: list[NamedArgument] = []
        if self.current().type == "LPAREN":
            arguments = self.parse_arguments()

        return GenericVerb(
            name_tok.value,
            arguments,
            line=at_tok.line,
            col=at_tok.col,
            offset=at_tok.offset,
        )

    def parse_arguments(self) -> list[NamedArgument]:
        """Parse `"(" named_argument ("," named_argument)* ")"`.

        Newlines between the parentheses are not statement terminators.
        """
        self.match("LPAREN")
        arguments = [self.parse_named_argument()]
        while True:
            self.skip_newlines()
            if self.match("COMMA") is not None:
                arguments.append(self.parse_named_argument())
                continue
            tok = self.current()
            if self.match("RPAREN") is None:
                raise self.error(
                    MalformedArguments,
                    "Expected ',' or ')' in argument list",
                    tok,
                    expected="',' or ')'",
                )
            return arguments

    def parse_named_argument(self) -> NamedArgument:
        """Parse `ident "=" quoted_string`."""
        self.skip_newlines()
        name_tok = self.current()
        if name_tok.type == "ERROR":
            raise self.error(
                InvalidIdentifier,
                "Expected an argument name",
                name_tok,
                expected="identifier",
            )
        if name_tok.type != "IDENT":
            raise self.error(
                MalformedArguments,
                "Expected an argument name",
                name_tok,
                expected="identifier",
            )
        self.advance()

        self.skip_newlines()
        tok = self.current()
        if self.match("EQUALS") is None:
            raise self.error(
                MalformedArguments,
                f"Expected '=' after argument name {name_tok.value!r}",
                tok,
                expected="'='",
            )

        self.skip_newlines()
        value_tok = self.current()
        if self.match("STRING") is None:
            raise self.error(
                MalformedArguments,
                f"Expected a quoted string value for argument {name_tok.value!r}",
                value_tok,
                expected="quoted string",
            )

        return NamedArgument(
            name_tok.value,
            value_tok.value,
            line=name_tok.line,
            col=name_tok.col,
            offset=name_tok.offset,
        )


def parse_query(source: str) -> Query:
    """Parse askl query text into a `Query`.

    Args:
        source: The complete query text.

    Returns:
        The root `Query` node.

    Raises:
        AsklSyntaxError: On the first lexical or syntax error.
    """
    return Parser(Lexer(CharacterStream(source))).parse()


__all__ = ["Parser", "parse_query"]
