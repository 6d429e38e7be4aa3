"""
Lexical scanner for the askl query language.

This module turns raw query text into a stream of tokens on demand:

Classes:
    CharacterStream: Stream abstraction for reading characters with offset/line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips horizontal whitespace (space, tab) and `/* ... */` comments
    - Emits NEWLINE tokens, since newlines terminate statements
    - Recognizes:
        * Identifiers (Unicode identifier start/continue classes)
        * Quoted strings (no escape sequences; the first `"` closes)
        * Punctuation: `@ ( ) , = { } ;`

Raises:
    UnterminatedString: If a quoted string reaches end of input.
    UnterminatedComment: If a `/*` comment reaches end of input.
    InvalidIdentifier: If `scan_identifier()` is called where no identifier starts.

Example:
    >>> lexer = Lexer(CharacterStream('@timeout(seconds="30")'))
    >>> lexer.next_token()
    Token(AT, @)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - token_hashmap
"""

from typing import Any

from askl.askl_constants import (
    COMMENT_CLOSE,
    COMMENT_OPEN,
    QUOTE,
    horizontal_whitespace,
    token_hashmap,
)
from askl.askl_errors import (
    AsklSyntaxError,
    InvalidIdentifier,
    UnterminatedComment,
    UnterminatedString,
)


def is_identifier_start(ch: str) -> bool:
    """Returns True if `ch` may begin an identifier (XID_Start; `_` is excluded)."""
    return ch != "" and ch != "_" and ch.isidentifier()


def is_identifier_continue(ch: str) -> bool:
    """Returns True if `ch` may appear after the first character of an identifier."""
    return ch != "" and ("a" + ch).isidentifier()


class CharacterStream:
    """
    A utility for reading characters from a string source with location tracking.

    `\\r\\n` counts as a single line break for line numbering; the offset still
    advances one per character.

    Attributes:
        source (str): The input source string.
        position (int): Current 0-based index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n" or (char == "\r" and self.peek(1) != "\n"):
            self.line += 1
            self.column = 1
        elif char != "\r":
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, text: str) -> bool:
        """Returns True if the unread input begins with `text`."""
        return self.source.startswith(text, self.position)

    def end_of_file(self) -> bool:
        """Returns True once every character has been consumed."""
        return self.position >= len(self.source)

    def location(self) -> tuple[int, int, int]:
        """Returns the current `(offset, line, column)` triple."""
        return self.position, self.line, self.column


class Token:
    """Represents a single lexical token in an askl query.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'STRING', 'AT', 'EOF').
        value (str): The token text; for STRING, the body without quotes.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
        offset (int): The 0-based character offset where the token starts.
    """

    def __init__(
        self, type_: str, value: str, line: int = 0, col: int = 0, offset: int = 0
    ):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col
        self.offset = offset

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.offset == other.offset
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col, self.offset))


class Lexer:
    """Lexical analyzer for askl queries.

    The Lexer takes a CharacterStream and produces Token objects one at a time.
    Trivia (spaces, tabs, comments) is skipped before every token; newlines are
    returned as NEWLINE tokens because they terminate statements.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def error(
        self,
        cls: type[AsklSyntaxError],
        message: str,
        location: tuple[int, int, int] | None = None,
        expected: str | None = None,
        found: str | None = None,
    ) -> AsklSyntaxError:
        """Builds an error of type `cls` at `location` (default: the current position)."""
        offset, line, col = location or self.stream.location()
        return cls(
            message,
            offset,
            line,
            col,
            expected=expected,
            found=found,
            source=self.stream.source,
        )

    def skip_trivia(self) -> None:
        """Skips horizontal whitespace and comments, stopping at newlines."""
        while not self.stream.end_of_file():
            if self.peek() in horizontal_whitespace:
                self.advance()
            elif self.stream.startswith(COMMENT_OPEN):
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Consumes a `/* ... */` comment. Comments do not nest.

        Raises:
            UnterminatedComment: If no `*/` follows the opening `/*`.
        """
        start = self.stream.location()
        self.advance()
        self.advance()
        while not self.stream.end_of_file():
            if self.stream.startswith(COMMENT_CLOSE):
                self.advance()
                self.advance()
                return
            self.advance()
        raise self.error(
            UnterminatedComment,
            "Comment opened with '/*' is never closed",
            start,
            expected="'*/'",
            found="end of input",
        )

    def scan_identifier(self) -> str:
        """Consumes one identifier-start character and any identifier-continue characters.

        Raises:
            InvalidIdentifier: If the current character cannot start an identifier.
        """
        if not is_identifier_start(self.peek()):
            found = repr(self.peek()) if self.peek() else "end of input"
            raise self.error(
                InvalidIdentifier,
                "Expected an identifier",
                expected="identifier",
                found=found,
            )
        ident = self.advance()
        while is_identifier_continue(self.peek()):
            ident += self.advance()
        return ident

    def scan_string_body(self) -> str:
        """Consumes everything up to (not including) the next `"`.

        The stream must be positioned just after the opening quote.

        Raises:
            UnterminatedString: If end of input comes before a closing quote.
        """
        start = self.stream.position
        end = self.stream.source.find(QUOTE, start)
        if end == -1:
            raise self.error(
                UnterminatedString,
                "Quoted string is never closed",
                expected="'\"'",
                found="end of input",
            )
        while self.stream.position < end:
            self.advance()
        return self.stream.source[start:end]

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; EOF once the input is exhausted.

        Raises:
            AsklLexError: For unterminated strings or comments.
        """
        self.skip_trivia()

        offset, line, col = self.stream.location()
        if self.stream.end_of_file():
            return Token("EOF", "EOF", line, col, offset)

        ch = self.peek()

        # 1. Newline, "\r\n" collapsed into one token
        if ch in "\r\n":
            value = self.advance()
            if value == "\r" and self.peek() == "\n":
                value += self.advance()
            return Token("NEWLINE", value, line, col, offset)

        # 2. Identifier
        if is_identifier_start(ch):
            return Token("IDENT", self.scan_identifier(), line, col, offset)

        # 3. String
        if ch == QUOTE:
            self.advance()
            try:
                body = self.scan_string_body()
            except UnterminatedString as e:
                raise self.error(
                    UnterminatedString,
                    e.message,
                    (offset, line, col),
                    expected=e.expected,
                    found=e.found,
                ) from None
            self.advance()
            return Token("STRING", body, line, col, offset)

        # 4. Punctuation
        if ch in token_hashmap:
            self.advance()
            return Token(token_hashmap[ch], ch, line, col, offset)

        # 5. Unknown character → error token, the parser reports it in context
        return Token("ERROR", self.advance(), line, col, offset)

    def tokenize(self) -> list[Token]:
        """Consumes the whole stream, returning every token including the final EOF."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens


__all__ = [
    "CharacterStream",
    "Lexer",
    "Token",
    "is_identifier_continue",
    "is_identifier_start",
    "token_hashmap",
]
