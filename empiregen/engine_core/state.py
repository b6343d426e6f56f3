"""
Empire State - The partial selection that requirements are evaluated against.

Design principles:
- Immutable: every with_* returns a new state
- Undecided is not empty: an empty set or None means the category has not
  been picked yet, and the evaluator skips it

COUNTRY_TYPE is always decided as {"default"} (player empires).
GRAPHICAL_CULTURE is never decided; no rule gates on the chosen shipset.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import AbstractSet, Iterable

from ..rules.model import RequirementCategory

PLAYER_COUNTRY_TYPE = frozenset({"default"})


@dataclass(frozen=True)
class EmpireState:
    ethics: frozenset[str] = frozenset()
    authority: str | None = None
    civics: frozenset[str] = frozenset()
    origin: str | None = None
    traits: frozenset[str] = frozenset()
    species_class: str | None = None
    species_archetype: str | None = None

    @staticmethod
    def empty() -> EmpireState:
        return EmpireState()

    def with_ethics(self, ethics: Iterable[str]) -> EmpireState:
        return replace(self, ethics=frozenset(ethics))

    def with_ethic(self, ethic_id: str) -> EmpireState:
        """Return new state with one more ethic selected."""
        return replace(self, ethics=self.ethics | {ethic_id})

    def with_authority(self, authority_id: str | None) -> EmpireState:
        return replace(self, authority=authority_id)

    def with_civics(self, civics: Iterable[str]) -> EmpireState:
        return replace(self, civics=frozenset(civics))

    def with_civic(self, civic_id: str) -> EmpireState:
        """Return new state with one more civic selected."""
        return replace(self, civics=self.civics | {civic_id})

    def with_origin(self, origin_id: str | None) -> EmpireState:
        return replace(self, origin=origin_id)

    def with_traits(self, traits: Iterable[str]) -> EmpireState:
        return replace(self, traits=frozenset(traits))

    def with_species(self, species_class: str | None, archetype: str | None) -> EmpireState:
        return replace(self, species_class=species_class, species_archetype=archetype)

    def values_for(self, category: RequirementCategory) -> AbstractSet[str]:
        """Selected ids for a category; empty when undecided."""
        match category:
            case RequirementCategory.ETHICS:
                return self.ethics
            case RequirementCategory.AUTHORITY:
                return _single(self.authority)
            case RequirementCategory.CIVICS:
                return self.civics
            case RequirementCategory.ORIGIN:
                return _single(self.origin)
            case RequirementCategory.TRAITS:
                return self.traits
            case RequirementCategory.SPECIES_CLASS:
                return _single(self.species_class)
            case RequirementCategory.SPECIES_ARCHETYPE:
                return _single(self.species_archetype)
            case RequirementCategory.COUNTRY_TYPE:
                return PLAYER_COUNTRY_TYPE
            case RequirementCategory.GRAPHICAL_CULTURE:
                return frozenset()
        return frozenset()

    def has_category(self, category: RequirementCategory) -> bool:
        """True once the category has been decided."""
        return bool(self.values_for(category))


def _single(value: str | None) -> frozenset[str]:
    return frozenset({value}) if value else frozenset()
