"""Lexer for veval expressions."""

import ply.lex as lex

from veval.errors import ParseError
from veval.value import INT64_MAX


class ExprLexer:
    """Lexer for tokenizing Rust-flavoured expressions."""

    reserved = {
        "true": "TRUE",
        "false": "FALSE",
        "None": "NONE",
    }

    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "FLOAT",
        "STRING",
        "DOTDOTEQ",
        "DOTDOT",
        "DOT",
        "PATHSEP",
        "COMMA",
        "LPAREN",
        "RPAREN",
        "LBRACKET",
        "RBRACKET",
        "PLUS",
        "MINUS",
        "STAR",
        "SLASH",
        "PERCENT",
        "EQEQ",
        "NE",
        "LE",
        "GE",
        "LT",
        "GT",
        "ANDAND",
        "OROR",
        "BANG",
        "AMP",
    ] + list(reserved.values())

    # PLY sorts string-defined tokens longest-first
    t_DOTDOTEQ = r"\.\.="
    t_DOTDOT = r"\.\."
    t_DOT = r"\."
    t_PATHSEP = r"::"
    t_COMMA = r","
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_PLUS = r"\+"
    t_MINUS = r"-"
    t_STAR = r"\*"
    t_SLASH = r"/"
    t_PERCENT = r"%"
    t_EQEQ = r"=="
    t_NE = r"!="
    t_LE = r"<="
    t_GE = r">="
    t_LT = r"<"
    t_GT = r">"
    t_ANDAND = r"&&"
    t_OROR = r"\|\|"
    t_BANG = r"!"
    t_AMP = r"&"

    t_ignore = " \t\r"

    _INT_SUFFIXES = ("i8", "i16", "i32", "i64", "isize", "u8", "u16", "u32", "u64", "usize")
    _FLOAT_SUFFIXES = ("f32", "f64")

    _ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    def t_FLOAT(self, t: lex.LexToken) -> lex.LexToken:
        r"\d[\d_]*(?:\.\d[\d_]*(?:[eE][+-]?\d+)?|[eE][+-]?\d+)(?:f32|f64)?"
        text = t.value
        for suffix in self._FLOAT_SUFFIXES:
            if text.endswith(suffix):
                text = text[:-len(suffix)]
        t.value = float(text.replace("_", ""))
        return t

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"\d[\d_]*(?:i8|i16|i32|i64|isize|u8|u16|u32|u64|usize|f32|f64)?"
        text = t.value
        for suffix in self._FLOAT_SUFFIXES:
            if text.endswith(suffix):
                t.type = "FLOAT"
                t.value = float(text[:-len(suffix)].replace("_", ""))
                return t
        for suffix in sorted(self._INT_SUFFIXES, key=len, reverse=True):
            if text.endswith(suffix):
                text = text[:-len(suffix)]
                break
        value = int(text.replace("_", ""))
        if value > INT64_MAX:
            raise ParseError(f"Integer literal {t.value} does not fit in 64 bits (position {t.lexpos})")
        t.value = value
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\]|\\.)*"'
        raw = t.value[1:-1]
        chars = []
        i = 0
        while i < len(raw):
            ch = raw[i]
            if ch == "\\":
                i += 1
                escaped = self._ESCAPES.get(raw[i])
                if escaped is None:
                    raise ParseError(f"Unknown escape '\\{raw[i]}' in string at position {t.lexpos}")
                chars.append(escaped)
            else:
                chars.append(ch)
            i += 1
        t.value = "".join(chars)
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        t.type = self.reserved.get(t.value, "IDENTIFIER")
        if t.type == "TRUE":
            t.value = True
        elif t.type == "FALSE":
            t.value = False
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise ParseError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- Lexer methods ---

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
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
