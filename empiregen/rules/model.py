"""
Requirement Model - Typed eligibility predicates.

A RequirementBlock is the compiled form of a `potential` or `possible`
clause:

    possible = {
        ethics = {
            value = ethic_X                     -> Value("ethic_X")
            NOT = { value = ethic_Y }           -> Not("ethic_Y")
            NOR = { value = A  value = B }      -> Nor(("A", "B"))
            OR  = { value = C  value = D }      -> Or(("C", "D"))
        }
        authority = { value = auth_Z }
    }

Predicates within a category are ANDed, categories are ANDed, and each
cross-category OR group needs at least one fully satisfied branch.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union


class RequirementCategory(Enum):
    """Categories that can appear in potential/possible blocks, by text key."""
    ETHICS = "ethics"
    AUTHORITY = "authority"
    CIVICS = "civics"
    ORIGIN = "origin"
    TRAITS = "traits"
    SPECIES_CLASS = "species_class"
    SPECIES_ARCHETYPE = "species_archetype"
    GRAPHICAL_CULTURE = "graphical_culture"
    COUNTRY_TYPE = "country_type"

    @property
    def key(self) -> str:
        return self.value

    @classmethod
    def from_key(cls, key: str) -> RequirementCategory | None:
        """Category for a text key, or None if unrecognized."""
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class Value:
    """Selection must contain the value."""
    value: str


@dataclass(frozen=True)
class Not:
    """Selection must not contain the value."""
    value: str


@dataclass(frozen=True)
class Nor:
    """Selection must contain none of the values."""
    values: tuple[str, ...]


@dataclass(frozen=True)
class Or:
    """Selection must contain at least one of the values."""
    values: tuple[str, ...]


Requirement = Union[Value, Not, Nor, Or]

CategoryRequirements = Mapping[RequirementCategory, tuple[Requirement, ...]]


@dataclass(frozen=True)
class RequirementBlock:
    """
    Compiled potential/possible clause.

    `categories` maps each category to its ANDed predicates.
    `cross_category_ors` holds OR groups; each group maps category -> predicates,
    and each category entry is one branch of the disjunction.
    """
    categories: CategoryRequirements = field(default_factory=dict)
    cross_category_ors: tuple[CategoryRequirements, ...] = ()

    def get(self, category: RequirementCategory) -> tuple[Requirement, ...]:
        return self.categories.get(category, ())

    def has_category(self, category: RequirementCategory) -> bool:
        return category in self.categories

    def has_positive(self, category: RequirementCategory) -> bool:
        """True if the category has a must-have predicate (Value or Or)."""
        return any(isinstance(r, (Value, Or)) for r in self.get(category))

    @property
    def is_empty(self) -> bool:
        return not self.categories and not self.cross_category_ors
