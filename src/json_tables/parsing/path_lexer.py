"""Lexer for data paths into the backing document."""

import ply.lex as lex


class PathLexer:
    """Lexer for tokenizing data paths such as ``/match[3]/opponent1``."""

    # Bracket contents are lexed in their own state so that digits in keys
    # stay part of the key.
    states = (("index", "exclusive"),)

    tokens = [
        "SLASH",
        "KEY",
        "LBRACKET",
        "RBRACKET",
        "INTEGER",
    ]

    t_SLASH = r"/"
    t_KEY = r"[^/\[\]]+"

    t_index_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.LexToken = None  # type: ignore

    def t_LBRACKET(self, t: lex.LexToken) -> lex.LexToken:
        r"\["
        t.lexer.begin("index")
        return t

    def t_index_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?\d+"
        t.value = int(t.value)
        return t

    def t_index_RBRACKET(self, t: lex.LexToken) -> lex.LexToken:
        r"\]"
        t.lexer.begin("INITIAL")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def t_index_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Expected array index, got '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.begin("INITIAL")
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
