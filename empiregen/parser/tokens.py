"""
Tokenizer - Raw game data text to a flat token stream.

Recognized tokens:
- Identifiers: letters, digits and _ - . : | ' /
- Quoted strings with backslash escapes
- Numbers with an optional leading minus and one decimal point
- Braces, '=' and the comparisons <, >, <=, >=
- Variables: '@name = ...' is a definition, any other '@name' a reference
- '#' comments run to end of line

The stream always ends with an EOF token.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens produced by the tokenizer."""
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    EQUALS = "equals"
    OPEN_BRACE = "open_brace"
    CLOSE_BRACE = "close_brace"
    COMPARISON = "comparison"
    VARIABLE_DEF = "variable_def"
    VARIABLE_REF = "variable_ref"
    EOF = "eof"


class TokenizeError(Exception):
    """Raised on an unrecognized character or an unterminated string."""

    def __init__(self, message: str, line: int, column: int):
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, column {column}")


@dataclass(frozen=True)
class Token:
    """A single token with its source position (1-based)."""
    type: TokenType
    value: str
    line: int
    column: int

    def as_number(self) -> float:
        return float(self.value)

    def as_int(self) -> int:
        return int(self.as_number())

    def is_identifier(self, expected: str) -> bool:
        """Case-insensitive identifier match."""
        return self.type == TokenType.IDENTIFIER and self.value.lower() == expected.lower()

    def __str__(self) -> str:
        return f"{self.type.name}({self.value}) at {self.line}:{self.column}"


_IDENT_EXTRA = set("_-.:|'/")


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_ident_part(c: str) -> bool:
    return c.isalnum() or c in _IDENT_EXTRA


class Tokenizer:
    """
    Single-pass tokenizer over one file's text.

    Usage:
        tokens = Tokenizer(text).run()
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def run(self) -> list[Token]:
        tokens: list[Token] = []
        while self.pos < len(self.text):
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.text):
                break

            c = self._peek()
            if c == "{":
                tokens.append(self._single(TokenType.OPEN_BRACE))
            elif c == "}":
                tokens.append(self._single(TokenType.CLOSE_BRACE))
            elif c == "=":
                tokens.append(self._single(TokenType.EQUALS))
            elif c == '"':
                tokens.append(self._read_string())
            elif c == "@":
                tokens.append(self._read_variable())
            elif c in "<>":
                tokens.append(self._read_comparison())
            elif c == "-" and self._has_next() and _is_digit(self.text[self.pos + 1]):
                tokens.append(self._read_number())
            elif _is_digit(c):
                tokens.append(self._read_number())
            elif _is_ident_start(c):
                tokens.append(self._read_identifier())
            else:
                raise TokenizeError(f"Unexpected character {c!r}", self.line, self.column)

        tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return tokens

    def _single(self, token_type: TokenType) -> Token:
        token = Token(token_type, self._peek(), self.line, self.column)
        self._advance()
        return token

    def _read_string(self) -> Token:
        start_line, start_col = self.line, self.column
        self._advance()  # opening quote
        chars = []
        while self.pos < len(self.text) and self._peek() != '"':
            if self._peek() == "\\" and self._has_next():
                self._advance()
            chars.append(self._peek())
            self._advance()
        if self.pos >= len(self.text):
            raise TokenizeError("Unterminated string", start_line, start_col)
        self._advance()  # closing quote
        return Token(TokenType.STRING, "".join(chars), start_line, start_col)

    def _read_variable(self) -> Token:
        start_line, start_col = self.line, self.column
        self._advance()  # @
        name = self._take_while(_is_ident_part)
        if not name:
            raise TokenizeError("Empty variable name after @", start_line, start_col)

        # A definition only if '=' follows on the same line
        saved = (self.pos, self.line, self.column)
        while self.pos < len(self.text) and self._peek() != "\n" and self._peek().isspace():
            self._advance()
        if self.pos < len(self.text) and self._peek() == "=":
            self._advance()
            return Token(TokenType.VARIABLE_DEF, name, start_line, start_col)

        self.pos, self.line, self.column = saved
        return Token(TokenType.VARIABLE_REF, name, start_line, start_col)

    def _read_number(self) -> Token:
        start_line, start_col = self.line, self.column
        chars = []
        if self._peek() == "-":
            chars.append("-")
            self._advance()
        chars.append(self._take_while(_is_digit))
        if self.pos < len(self.text) and self._peek() == ".":
            chars.append(".")
            self._advance()
            chars.append(self._take_while(_is_digit))
        return Token(TokenType.NUMBER, "".join(chars), start_line, start_col)

    def _read_identifier(self) -> Token:
        start_line, start_col = self.line, self.column
        return Token(TokenType.IDENTIFIER, self._take_while(_is_ident_part), start_line, start_col)

    def _read_comparison(self) -> Token:
        start_line, start_col = self.line, self.column
        op = self._peek()
        self._advance()
        if self.pos < len(self.text) and self._peek() == "=":
            op += "="
            self._advance()
        return Token(TokenType.COMPARISON, op, start_line, start_col)

    def _take_while(self, predicate) -> str:
        start = self.pos
        while self.pos < len(self.text) and predicate(self._peek()):
            self._advance()
        return self.text[start:self.pos]

    def _skip_whitespace_and_comments(self):
        while self.pos < len(self.text):
            c = self._peek()
            if c == "#":
                while self.pos < len(self.text) and self._peek() != "\n":
                    self._advance()
            elif c.isspace():
                self._advance()
            else:
                break

    def _peek(self) -> str:
        return self.text[self.pos]

    def _has_next(self) -> bool:
        return self.pos + 1 < len(self.text)

    def _advance(self):
        if self.text[self.pos] == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1


def tokenize(text: str) -> list[Token]:
    """Tokenize one file's text. Raises TokenizeError on bad input."""
    return Tokenizer(text).run()
