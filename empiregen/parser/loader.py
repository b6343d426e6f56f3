"""
Game File Loader - Reads game data directories into parsed trees.

Loading order:
1. Global scripted variables (common/scripted_variables)
2. Each category directory, one combined root per directory

Every file in a directory is parsed with its own copy of the global
variable scope, in sorted filename order. A file that fails to tokenize
or parse is skipped as a whole and logged.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging
import time

from .tokens import TokenType, TokenizeError, tokenize
from .tree import Node, ParseError, parse

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(BOM) else text


def parse_text(text: str, variables: dict[str, str] | None = None) -> Node:
    """Tokenize and parse text. Errors propagate to the caller."""
    return parse(tokenize(strip_bom(text)), variables)


def parse_file(path: str | Path, variables: dict[str, str] | None = None) -> Node:
    """Parse one UTF-8 file (optional BOM) with the given variable scope."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_text(text, variables)


def _txt_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".txt")


def load_scripted_variables(directory: str | Path) -> dict[str, str]:
    """
    Collect '@name = value' definitions from every file in a directory.

    A value that references an earlier variable is resolved; one that
    references an unknown variable is skipped.
    """
    directory = Path(directory)
    variables: dict[str, str] = {}
    if not directory.is_dir():
        return variables

    for path in _txt_files(directory):
        tokens = tokenize(strip_bom(path.read_text(encoding="utf-8")))
        for i, token in enumerate(tokens[:-1]):
            if token.type != TokenType.VARIABLE_DEF:
                continue
            value_token = tokens[i + 1]
            if value_token.type == TokenType.VARIABLE_REF:
                resolved = variables.get(value_token.value)
                if resolved is not None:
                    variables[token.value] = resolved
            elif value_token.type in (TokenType.IDENTIFIER, TokenType.STRING, TokenType.NUMBER):
                variables[token.value] = value_token.value
    return variables


def load_directory(directory: str | Path, global_variables: dict[str, str] | None = None) -> Node:
    """
    Parse every .txt file in a directory into one combined root node.

    Missing directories yield an empty root.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return Node.root([])

    global_variables = global_variables or {}
    children: list[Node] = []
    for path in _txt_files(directory):
        file_variables = dict(global_variables)
        try:
            file_root = parse_file(path, file_variables)
        except (TokenizeError, ParseError) as e:
            logger.warning("Skipping file %s due to parse error: %s", path.name, e)
            continue
        children.extend(file_root.children)

    logger.debug("Loaded %d top-level entries from %s", len(children), directory)
    return Node.root(children)


# Category name -> path under <game>/common
CATEGORY_DIRECTORIES = {
    "ethics": "ethics",
    "authorities": "governments/authorities",
    "civics": "governments/civics",
    "species_archetypes": "species_archetypes",
    "species_classes": "species_classes",
    "traits": "traits",
    "planet_classes": "planet_classes",
    "graphical_cultures": "graphical_culture",
}


@dataclass
class GameFiles:
    """
    Parsed roots for every category directory of a game install.

    Usage:
        files = GameFiles.load("/path/to/game")
        files.roots["ethics"].children
    """
    game_path: Path
    variables: dict[str, str] = field(default_factory=dict)
    roots: dict[str, Node] = field(default_factory=dict)

    def get(self, category: str) -> Node:
        return self.roots.get(category, Node.root([]))

    @classmethod
    def load(cls, game_path: str | Path) -> GameFiles:
        game_path = Path(game_path)
        common = game_path / "common"
        logger.info("Loading game files from %s", game_path)
        start = time.time()

        variables = load_scripted_variables(common / "scripted_variables")
        logger.info("Loaded %d global scripted variables", len(variables))

        roots = {}
        for category, subdir in CATEGORY_DIRECTORIES.items():
            roots[category] = load_directory(common / subdir, variables)
            logger.info("Loaded %d %s entries", len(roots[category].children), category)

        elapsed_ms = int((time.time() - start) * 1000)
        logger.info("Game file loading complete in %dms", elapsed_ms)
        return cls(game_path=game_path, variables=variables, roots=roots)
