"""
Error taxonomy for the askl front end.

Every failure raised while scanning or parsing an askl query is an
`AsklSyntaxError`. The class hierarchy mirrors where the error is detected:

    AsklSyntaxError (SyntaxError)
    ├── AsklLexError
    │   ├── InvalidIdentifier
    │   ├── UnterminatedString
    │   └── UnterminatedComment
    └── AsklParseError
        ├── MalformedArguments
        ├── UnclosedScope
        └── UnexpectedTrailingInput

Errors carry the 0-based character offset plus the 1-based line and column at
which they were detected. Because they subclass `SyntaxError`, the standard
`lineno`, `offset` and `text` attributes are filled in too, so an uncaught
error is rendered by Python with a caret under the offending column.
"""

import re


class AsklSyntaxError(SyntaxError):
    """Base class for every askl scanning or parsing failure.

    Attributes:
        kind (str): Stable name of the error kind (e.g. "UnclosedScope").
        message (str): Human-readable description without location.
        position (int): 0-based character offset into the source.
        line (int): 1-based line number.
        col (int): 1-based column number.
        expected (str | None): What the parser was looking for, if known.
        found (str | None): What was actually at the location, if known.
        source (str): The full query text, used by `render()`.
    """

    kind = "AsklSyntaxError"

    def __init__(
        self,
        message: str,
        position: int,
        line: int,
        col: int,
        expected: str | None = None,
        found: str | None = None,
        source: str = "",
    ):
        self.message = message
        self.position = position
        self.line = line
        self.col = col
        self.expected = expected
        self.found = found
        self.source = source
        super().__init__(
            f"{self.kind}: {message} at line {line}, col {col}",
            ("<askl>", line, col, self.source_line(), line, col + 1),
        )

    def source_line(self) -> str:
        """Returns the text of the line the error points at (without newline).

        Only LF, CRLF and CR end a line, matching how the lexer counts lines.
        """
        lines = re.split(r"\r\n|\r|\n", self.source)
        if 0 < self.line <= len(lines):
            return lines[self.line - 1]
        return ""

    def render(self) -> str:
        """Formats the error with the offending line and a caret under the column.

        Returns:
            str: A multi-line diagnostic suitable for printing to a terminal.
        """
        text = self.source_line()
        header = f"{self.kind}: {self.message} (line {self.line}, col {self.col})"
        if self.expected is not None and self.found is not None:
            header += f"\n  expected {self.expected}, found {self.found}"
        if not text and self.col == 1:
            return header
        prefix = "".join(ch if ch == "\t" else " " for ch in text[: self.col - 1])
        return f"{header}\n  {text}\n  {prefix}^"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "message": self.message,
            "offset": self.position,
            "line": self.line,
            "col": self.col,
            "expected": self.expected,
            "found": self.found,
        }


class AsklLexError(AsklSyntaxError):
    """Raised by the scanner."""

    kind = "AsklLexError"


class InvalidIdentifier(AsklLexError):
    """An identifier was required but the character cannot start one."""

    kind = "InvalidIdentifier"


class UnterminatedString(AsklLexError):
    """A quoted string was opened and never closed."""

    kind = "UnterminatedString"


class UnterminatedComment(AsklLexError):
    """A `/*` comment was opened and never closed."""

    kind = "UnterminatedComment"


class AsklParseError(AsklSyntaxError):
    """Raised by the parser."""

    kind = "AsklParseError"


class MalformedArguments(AsklParseError):
    """A generic verb's `( ... )` list is not `ident = "string"` pairs."""

    kind = "MalformedArguments"


class UnclosedScope(AsklParseError):
    """A `{` scope was not closed by `}`."""

    kind = "UnclosedScope"


class UnexpectedTrailingInput(AsklParseError):
    """Input remains after a complete top-level query."""

    kind = "UnexpectedTrailingInput"


__all__ = [
    "AsklLexError",
    "AsklParseError",
    "AsklSyntaxError",
    "InvalidIdentifier",
    "MalformedArguments",
    "UnclosedScope",
    "UnexpectedTrailingInput",
    "UnterminatedComment",
    "UnterminatedString",
]
