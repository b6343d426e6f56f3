"""
Compatibility Filter - Catalog entities eligible for the current selection.

Each step of generation and reroll narrows its candidates here. Requirement
blocks go through the evaluator; traits additionally honour their flat
allow/forbid lists:

- allow list: empty means unrestricted, otherwise the value must be listed
- forbid list: empty means unrestricted, otherwise the value must not be listed
- for set categories (ethics, civics) one listed value is enough to allow,
  and any listed value forbids
"""

from __future__ import annotations
from typing import AbstractSet, Sequence

from ..catalog.catalog import Catalog
from ..catalog.entities import (
    Authority,
    Civic,
    Ethic,
    GraphicalCulture,
    LeaderTrait,
    Origin,
    PlanetClass,
    SpeciesArchetype,
    SpeciesClass,
    SpeciesTrait,
)
from ..rules.evaluator import RequirementEvaluator
from .state import EmpireState

# Archetypes that never appear in the empire creator
NON_SELECTABLE_ARCHETYPES = ("PRESAPIENT", "OTHER", "ROBOT")


def _allowed(allow_list: Sequence[str], value: str | None) -> bool:
    return not allow_list or (value is not None and value in allow_list)


def _not_forbidden(forbid_list: Sequence[str], value: str | None) -> bool:
    return not forbid_list or value is None or value not in forbid_list


def _allowed_any(allow_list: Sequence[str], values: AbstractSet[str]) -> bool:
    return not allow_list or any(v in values for v in allow_list)


def _forbidden_none(forbid_list: Sequence[str], values: AbstractSet[str]) -> bool:
    return not any(v in values for v in forbid_list)


class CompatibilityFilter:
    """
    Usage:
        compat = CompatibilityFilter(catalog)
        authorities = compat.compatible_authorities(state)
    """

    def __init__(self, catalog: Catalog, evaluator: RequirementEvaluator | None = None):
        self.catalog = catalog
        self.evaluator = evaluator or RequirementEvaluator()

    def compatible_authorities(self, state: EmpireState) -> list[Authority]:
        return [
            a for a in self.catalog.authorities
            if self.evaluator.evaluate_both(a.potential, a.possible, state)
        ]

    def compatible_civics(self, state: EmpireState) -> list[Civic]:
        """Start-pickable civics not already selected whose rules hold."""
        return [
            c for c in self.catalog.civics
            if c.pickable_at_start
            and c.id not in state.civics
            and self.evaluator.evaluate_both(c.potential, c.possible, state)
        ]

    def compatible_origins(self, state: EmpireState) -> list[Origin]:
        return [
            o for o in self.catalog.origins
            if self.evaluator.evaluate_both(o.potential, o.possible, state)
        ]

    def compatible_traits(self, archetype_id: str, state: EmpireState) -> list[SpeciesTrait]:
        return [
            t for t in self.catalog.species_traits
            if archetype_id in t.allowed_archetypes
            and _allowed(t.allowed_species_classes, state.species_class)
            and _allowed(t.allowed_origins, state.origin)
            and _not_forbidden(t.forbidden_origins, state.origin)
            and _allowed_any(t.allowed_civics, state.civics)
            and _forbidden_none(t.forbidden_civics, state.civics)
            and _allowed_any(t.allowed_ethics, state.ethics)
            and _forbidden_none(t.forbidden_ethics, state.ethics)
        ]

    def compatible_leader_traits(self, leader_class: str, state: EmpireState) -> list[LeaderTrait]:
        return [
            t for t in self.catalog.leader_traits
            if leader_class in t.leader_classes
            and _not_forbidden(t.forbidden_origins, state.origin)
            and _allowed_any(t.allowed_ethics, state.ethics)
            and _allowed(t.allowed_origins, state.origin)
            and _allowed_any(t.allowed_civics, state.civics)
            and _forbidden_none(t.forbidden_civics, state.civics)
            and _forbidden_none(t.forbidden_ethics, state.ethics)
        ]

    def regular_ethics(self) -> list[Ethic]:
        return [e for e in self.catalog.ethics if not e.is_gestalt]

    def gestalt_ethic(self) -> Ethic | None:
        return next((e for e in self.catalog.ethics if e.is_gestalt), None)

    def gestalt_authorities(self) -> list[Authority]:
        return [a for a in self.catalog.authorities if a.is_gestalt]

    def selectable_archetypes(self) -> list[SpeciesArchetype]:
        return [a for a in self.catalog.archetypes if a.id not in NON_SELECTABLE_ARCHETYPES]

    def species_classes_for(self, archetype_id: str) -> list[SpeciesClass]:
        return [sc for sc in self.catalog.species_classes if sc.archetype == archetype_id]

    def habitable_planet_classes(self) -> list[PlanetClass]:
        return list(self.catalog.planet_classes)

    def selectable_shipsets(self) -> list[GraphicalCulture]:
        return list(self.catalog.graphical_cultures)

    def find_trait(self, trait_id: str) -> SpeciesTrait | None:
        return self.catalog.find_trait(trait_id)
