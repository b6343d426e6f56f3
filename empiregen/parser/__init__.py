"""
Parser - Game data dialect to a generic node tree.

The parser:
1. Tokenizes raw text (comments, strings, numbers, variables, comparisons)
2. Builds a tree of leaves, blocks and bare values
3. Resolves @variables against a per-file scope seeded from global scope
4. Loads whole directories in sorted filename order
"""

from .tokens import Token, TokenType, TokenizeError, Tokenizer, tokenize
from .tree import Node, ParseError, Parser, parse
from .loader import (
    GameFiles,
    load_directory,
    load_scripted_variables,
    parse_file,
    parse_text,
    strip_bom,
)

__all__ = [
    "Token",
    "TokenType",
    "TokenizeError",
    "Tokenizer",
    "tokenize",
    "Node",
    "ParseError",
    "Parser",
    "parse",
    "GameFiles",
    "load_directory",
    "load_scripted_variables",
    "parse_file",
    "parse_text",
    "strip_bom",
]
