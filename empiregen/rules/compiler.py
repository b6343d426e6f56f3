"""
Requirement Compiler - Parsed potential/possible nodes to RequirementBlocks.

Skips tooltip `text` and `always` entries and any unrecognized category
key, so newer rule types in the game data are ignored rather than fatal.
"""

from __future__ import annotations

from ..parser.tree import Node
from .model import (
    CategoryRequirements,
    Nor,
    Not,
    Or,
    Requirement,
    RequirementBlock,
    RequirementCategory,
    Value,
)

_SKIPPED_KEYS = {"text", "always"}


def compile_requirements(node: Node | None) -> RequirementBlock | None:
    """
    Compile a potential/possible block.

    Returns None when the block is absent or holds no requirements,
    which the evaluator always treats as satisfied.
    """
    if node is None or not node.children:
        return None

    categories: dict[RequirementCategory, list[Requirement]] = {}
    cross_category_ors: list[CategoryRequirements] = []

    for child in node.children:
        if child.key is None or child.key in _SKIPPED_KEYS:
            continue

        if child.key == "OR" and child.is_block:
            group = _compile_cross_category_or(child)
            if group:
                cross_category_ors.append(group)
            continue

        category = RequirementCategory.from_key(child.key)
        if category is None or not child.is_block:
            continue

        requirements = compile_category(child)
        if requirements:
            categories.setdefault(category, []).extend(requirements)

    if not categories and not cross_category_ors:
        return None
    return RequirementBlock(
        categories={c: tuple(reqs) for c, reqs in categories.items()},
        cross_category_ors=tuple(cross_category_ors),
    )


def _compile_cross_category_or(or_node: Node) -> CategoryRequirements:
    branches: dict[RequirementCategory, list[Requirement]] = {}
    for child in or_node.children:
        if child.key is None or not child.is_block:
            continue
        category = RequirementCategory.from_key(child.key)
        if category is None:
            continue
        requirements = compile_category(child)
        if requirements:
            branches.setdefault(category, []).extend(requirements)
    return {c: tuple(reqs) for c, reqs in branches.items()}


def compile_category(category_node: Node) -> list[Requirement]:
    """Compile one category block, e.g. `ethics = { ... }`."""
    requirements: list[Requirement] = []

    for child in category_node.children:
        if child.key == "value":
            if child.value is not None:
                requirements.append(Value(child.value))
        elif child.key == "NOT":
            value = child.child_value("value") if child.is_block else None
            if value is not None:
                requirements.append(Not(value))
        elif child.key == "NOR":
            values = _values_of(child)
            if values:
                requirements.append(Nor(values))
        elif child.key == "OR":
            values = _values_of(child)
            if values:
                requirements.append(Or(values))

    return requirements


def _values_of(block: Node) -> tuple[str, ...]:
    """All `value = X` entries of a NOT/NOR/OR block."""
    if not block.is_block:
        return ()
    return tuple(
        child.value for child in block.children
        if child.key == "value" and child.value is not None
    )
