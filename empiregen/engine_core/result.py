"""
Generated Result - One complete, immutable empire configuration.

Reroll paths never mutate a result: they build a new one with the with_*
helpers so the previous empire stays valid if a reroll fails partway.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any

from .state import EmpireState


@dataclass(frozen=True)
class SecondarySpecies:
    """A second species requested by the origin or a civic."""
    title: str | None
    species_class: str
    enforced_traits: tuple[str, ...] = ()
    additional_traits: tuple[str, ...] = ()
    trait_points_used: int = 0
    trait_points_budget: int = 2
    max_trait_picks: int = 5

    @property
    def all_traits(self) -> tuple[str, ...]:
        return self.enforced_traits + self.additional_traits


@dataclass(frozen=True)
class GeneratedEmpire:
    ethics: tuple[str, ...]
    authority: str
    civics: tuple[str, str]
    origin: str
    species_archetype: str
    species_class: str
    species_traits: tuple[str, ...]  # Enforced ids first, in pick order
    trait_points_used: int
    trait_points_budget: int
    homeworld: str
    habitability_preference: str
    shipset: str
    leader_class: str
    leader_traits: tuple[str, ...] = ()
    secondary_species: SecondarySpecies | None = None
    enforced_trait_ids: tuple[str, ...] = ()  # Origin/civic traits, free of cost

    @property
    def random_trait_ids(self) -> tuple[str, ...]:
        """Traits drawn from the pool, excluding enforced ones."""
        return tuple(t for t in self.species_traits if t not in self.enforced_trait_ids)

    def to_state(self) -> EmpireState:
        return EmpireState(
            ethics=frozenset(self.ethics),
            authority=self.authority,
            civics=frozenset(self.civics),
            origin=self.origin,
            traits=frozenset(self.species_traits),
            species_class=self.species_class,
            species_archetype=self.species_archetype,
        )

    def with_ethics(self, ethics) -> GeneratedEmpire:
        return replace(self, ethics=tuple(ethics))

    def with_authority(self, authority: str) -> GeneratedEmpire:
        return replace(self, authority=authority)

    def with_civic(self, slot: int, civic_id: str) -> GeneratedEmpire:
        """Return new empire with civic slot 0 or 1 replaced."""
        civics = list(self.civics)
        civics[slot] = civic_id
        return replace(self, civics=tuple(civics))

    def with_origin(self, origin: str) -> GeneratedEmpire:
        return replace(self, origin=origin)

    def with_traits(
        self,
        traits,
        points_used: int,
        enforced_trait_ids=None,
    ) -> GeneratedEmpire:
        enforced = self.enforced_trait_ids if enforced_trait_ids is None else tuple(enforced_trait_ids)
        return replace(
            self,
            species_traits=tuple(traits),
            trait_points_used=points_used,
            enforced_trait_ids=enforced,
        )

    def with_homeworld(self, homeworld: str, habitability_preference: str) -> GeneratedEmpire:
        return replace(self, homeworld=homeworld, habitability_preference=habitability_preference)

    def with_shipset(self, shipset: str) -> GeneratedEmpire:
        return replace(self, shipset=shipset)

    def with_leader(self, leader_class: str, leader_traits) -> GeneratedEmpire:
        return replace(self, leader_class=leader_class, leader_traits=tuple(leader_traits))

    def with_secondary_species(self, secondary: SecondarySpecies | None) -> GeneratedEmpire:
        return replace(self, secondary_species=secondary)

    def to_dict(self) -> dict[str, Any]:
        secondary = None
        if self.secondary_species is not None:
            s = self.secondary_species
            secondary = {
                "title": s.title,
                "species_class": s.species_class,
                "enforced_traits": list(s.enforced_traits),
                "additional_traits": list(s.additional_traits),
                "trait_points_used": s.trait_points_used,
                "trait_points_budget": s.trait_points_budget,
                "max_trait_picks": s.max_trait_picks,
            }
        return {
            "ethics": list(self.ethics),
            "authority": self.authority,
            "civics": list(self.civics),
            "origin": self.origin,
            "species_archetype": self.species_archetype,
            "species_class": self.species_class,
            "species_traits": list(self.species_traits),
            "enforced_trait_ids": list(self.enforced_trait_ids),
            "trait_points_used": self.trait_points_used,
            "trait_points_budget": self.trait_points_budget,
            "homeworld": self.homeworld,
            "habitability_preference": self.habitability_preference,
            "shipset": self.shipset,
            "leader_class": self.leader_class,
            "leader_traits": list(self.leader_traits),
            "secondary_species": secondary,
        }
