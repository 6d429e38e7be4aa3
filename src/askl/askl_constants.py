"""
Token tables shared by the askl lexer and parser.

Exports:
    token_hashmap: Maps each punctuation character to its canonical token type.
    token_display: Human-readable token names used in diagnostics.
    terminator_tokens: Token types that separate statements.
    horizontal_whitespace: Characters discarded between tokens.
"""

token_hashmap: dict[str, str] = {
    "@": "AT",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
    "=": "EQUALS",
    "{": "LBRACE",
    "}": "RBRACE",
    ";": "SEMICOLON",
}

token_display: dict[str, str] = {v: repr(k) for k, v in token_hashmap.items()}
token_display.update(
    {
        "IDENT": "identifier",
        "STRING": "quoted string",
        "NEWLINE": "newline",
        "EOF": "end of input",
    }
)

terminator_tokens: frozenset[str] = frozenset({"SEMICOLON", "NEWLINE"})

horizontal_whitespace = " \t"

COMMENT_OPEN = "/*"
COMMENT_CLOSE = "*/"
QUOTE = '"'
