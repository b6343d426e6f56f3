"""
Tree Parser - Token stream to a generic node tree.

Grammar (recursive descent):
    entries := entry*                      until '}' or EOF
    entry   := VARIABLE_DEF scalar entry   (stores the variable, emits nothing)
             | VARIABLE_REF                (bare value, resolved now)
             | key '=' '{' entries '}'     (block)
             | key '=' scalar              (leaf)
             | key COMPARISON scalar       (leaf, value "<op> <scalar>")
             | scalar                      (bare value)

Variables resolve against a mutable scope dict. Callers give each file its
own copy of the global scope so definitions never leak between files.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .tokens import Token, TokenType


class ParseError(Exception):
    """Raised on malformed structure or an undefined variable reference."""

    def __init__(self, message: str, token: Token):
        self.token = token
        super().__init__(f"{message} at {token}")


@dataclass(frozen=True)
class Node:
    """
    A node in the parsed tree.

    Three shapes:
    - leaf:       key and value, no children   (cost = 2)
    - block:      key and children, no value   (potential = { ... })
    - bare value: value only                   (the A in { A B C })

    The root is a block with no key. Children keep source order and
    duplicate keys are preserved.
    """
    key: str | None = None
    value: str | None = None
    children: tuple[Node, ...] = field(default_factory=tuple)

    @staticmethod
    def root(children) -> Node:
        return Node(children=tuple(children))

    @staticmethod
    def leaf(key: str, value: str) -> Node:
        return Node(key=key, value=value)

    @staticmethod
    def block(key: str, children) -> Node:
        return Node(key=key, children=tuple(children))

    @staticmethod
    def bare_value(value: str) -> Node:
        return Node(value=value)

    @property
    def is_leaf(self) -> bool:
        return self.value is not None and not self.children

    @property
    def is_block(self) -> bool:
        return self.value is None and bool(self.children)

    @property
    def is_bare_value(self) -> bool:
        return self.key is None and self.value is not None

    def child(self, key: str) -> Node | None:
        """First child with the given key, or None."""
        for node in self.children:
            if node.key == key:
                return node
        return None

    def children_with(self, key: str) -> list[Node]:
        """All children with the given key, in source order."""
        return [node for node in self.children if node.key == key]

    def child_value(self, key: str) -> str | None:
        node = self.child(key)
        return node.value if node else None

    def child_int(self, key: str, default: int) -> int:
        value = self.child_value(key)
        return int(float(value)) if value is not None else default

    def child_float(self, key: str, default: float) -> float:
        value = self.child_value(key)
        return float(value) if value is not None else default

    def child_bool(self, key: str, default: bool) -> bool:
        value = self.child_value(key)
        return value.lower() == "yes" if value is not None else default

    def bare_values(self) -> list[str]:
        return [node.value for node in self.children if node.is_bare_value]


_KEY_TYPES = {TokenType.IDENTIFIER, TokenType.STRING, TokenType.NUMBER}


class Parser:
    """
    Recursive-descent parser over a token list.

    Usage:
        root = Parser(tokens, variables).parse()
    """

    def __init__(self, tokens: list[Token], variables: dict[str, str]):
        self.tokens = tokens
        self.variables = variables
        self.pos = 0

    def parse(self) -> Node:
        children = self._parse_entries()
        self._expect(TokenType.EOF)
        return Node.root(children)

    def _parse_entries(self) -> list[Node]:
        entries = []
        while not self._at_end() and self._current().type != TokenType.CLOSE_BRACE:
            entry = self._parse_entry()
            if entry is not None:
                entries.append(entry)
        return entries

    def _parse_entry(self) -> Node | None:
        token = self._current()

        # Definitions emit no node; the tokenizer already consumed the '='
        while token.type == TokenType.VARIABLE_DEF:
            self._advance()
            self.variables[token.value] = self._parse_scalar()
            if self._at_end() or self._current().type == TokenType.CLOSE_BRACE:
                return None
            token = self._current()

        if token.type == TokenType.VARIABLE_REF:
            self._advance()
            return Node.bare_value(self._resolve(token))

        if token.type in _KEY_TYPES and self.pos + 1 < len(self.tokens):
            following = self.tokens[self.pos + 1]
            if following.type == TokenType.EQUALS:
                return self._parse_key_value()
            if following.type == TokenType.COMPARISON:
                return self._parse_comparison()

        if token.type not in _KEY_TYPES:
            raise ParseError(f"Unexpected {token.type.name}", token)
        self._advance()
        return Node.bare_value(token.value)

    def _parse_key_value(self) -> Node:
        key = self._current().value
        self._advance()  # key
        self._advance()  # =

        if self._current().type == TokenType.OPEN_BRACE:
            self._advance()
            children = self._parse_entries()
            self._expect(TokenType.CLOSE_BRACE)
            self._advance()
            return Node.block(key, children)

        return Node.leaf(key, self._parse_scalar())

    def _parse_comparison(self) -> Node:
        key = self._current().value
        self._advance()
        op = self._current().value
        self._advance()
        return Node.leaf(key, f"{op} {self._parse_scalar()}")

    def _parse_scalar(self) -> str:
        token = self._current()
        if token.type == TokenType.VARIABLE_REF:
            self._advance()
            return self._resolve(token)
        if token.type not in _KEY_TYPES:
            raise ParseError(f"Expected a value but got {token.type.name}", token)
        self._advance()
        return token.value

    def _resolve(self, token: Token) -> str:
        try:
            return self.variables[token.value]
        except KeyError:
            raise ParseError(f"Undefined variable @{token.value}", token) from None

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _at_end(self) -> bool:
        return self.pos >= len(self.tokens) or self.tokens[self.pos].type == TokenType.EOF

    def _advance(self):
        if not self._at_end():
            self.pos += 1

    def _expect(self, token_type: TokenType):
        if self._current().type != token_type:
            raise ParseError(
                f"Expected {token_type.name} but got {self._current().type.name}",
                self._current(),
            )


def parse(tokens: list[Token], variables: dict[str, str] | None = None) -> Node:
    """Parse a token list into a root node, resolving variables from scope."""
    return Parser(tokens, variables if variables is not None else {}).parse()
