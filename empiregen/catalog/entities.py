"""
Catalog Entities - Typed, immutable records extracted from game data.

Each entity that can be gated by rules carries its own `potential` and
`possible` RequirementBlocks (None when absent) and a non-negative
`random_weight` (default 1) used by weighted selection.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..rules.model import RequirementBlock

GESTALT_ETHIC = "ethic_gestalt_consciousness"
HIVE_MIND = "auth_hive_mind"
MACHINE_INTELLIGENCE = "auth_machine_intelligence"
GESTALT_AUTHORITIES = (HIVE_MIND, MACHINE_INTELLIGENCE)

BIOLOGICAL = "BIOLOGICAL"


@dataclass(frozen=True)
class Ethic:
    id: str
    cost: int
    category: str | None = None
    is_fanatic: bool = False
    is_gestalt: bool = False
    regular_variant: str | None = None
    fanatic_variant: str | None = None
    tags: tuple[str, ...] = ()
    random_weight: int = 1

    def shares_axis(self, other: Ethic) -> bool:
        """
        Two ethics share an axis if they are the same ethic, one is the
        other's fanatic/regular variant, or they have the same category.
        """
        if self.id == other.id:
            return True
        if self.id in (other.regular_variant, other.fanatic_variant):
            return True
        if other.id in (self.regular_variant, self.fanatic_variant):
            return True
        return self.category is not None and self.category == other.category


@dataclass(frozen=True)
class Authority:
    id: str
    election_type: str = "none"
    has_heir: bool = False
    potential: RequirementBlock | None = None
    possible: RequirementBlock | None = None
    random_weight: int = 1
    is_gestalt: bool = False


@dataclass(frozen=True)
class SecondarySpeciesConfig:
    """
    Secondary species request from an origin or civic.

    title: display key for the secondary species role
    enforced_trait_ids: traits applied automatically to that species
    """
    title: str | None
    enforced_trait_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Civic:
    id: str
    potential: RequirementBlock | None = None
    possible: RequirementBlock | None = None
    pickable_at_start: bool = True
    random_weight: int = 1
    secondary_species: SecondarySpeciesConfig | None = None
    enforced_trait_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Origin:
    id: str
    potential: RequirementBlock | None = None
    possible: RequirementBlock | None = None
    dlc_requirement: str | None = None
    random_weight: int = 1
    secondary_species: SecondarySpeciesConfig | None = None
    enforced_trait_ids: tuple[str, ...] = ()
    fixed_homeworld: str | None = None  # Planet class id the origin always starts on
    habitability_preference: str | None = None
    extended_leader_traits: bool = False  # Budgeted multi-pick of leader traits


@dataclass(frozen=True)
class SpeciesArchetype:
    id: str
    trait_points: int
    max_traits: int
    robotic: bool = False


@dataclass(frozen=True)
class SpeciesClass:
    id: str
    archetype: str


@dataclass(frozen=True)
class SpeciesTrait:
    id: str
    cost: int
    allowed_archetypes: tuple[str, ...] = ()
    allowed_species_classes: tuple[str, ...] = ()
    allowed_planet_classes: tuple[str, ...] = ()
    opposites: tuple[str, ...] = ()
    initial: bool = True
    randomized: bool = True
    dlc_requirement: str | None = None
    tags: tuple[str, ...] = ()
    allowed_origins: tuple[str, ...] = ()
    forbidden_origins: tuple[str, ...] = ()
    allowed_civics: tuple[str, ...] = ()
    forbidden_civics: tuple[str, ...] = ()
    allowed_ethics: tuple[str, ...] = ()
    forbidden_ethics: tuple[str, ...] = ()

    @staticmethod
    def stub(trait_id: str, cost: int = 0) -> SpeciesTrait:
        """Placeholder for an enforced trait missing from the creation pool."""
        return SpeciesTrait(id=trait_id, cost=cost, initial=False, randomized=False)


@dataclass(frozen=True)
class PlanetClass:
    """A habitable planet class that can serve as a homeworld."""
    id: str
    climate: str = "unknown"


@dataclass(frozen=True)
class GraphicalCulture:
    """A player-selectable shipset."""
    id: str


@dataclass(frozen=True)
class LeaderTrait:
    """
    A trait a starting ruler can have.

    cost is +1 for positive luminary traits, -1 for negative ones and 0
    for regular traits.
    """
    id: str
    leader_classes: tuple[str, ...] = ()
    forbidden_origins: tuple[str, ...] = ()
    allowed_ethics: tuple[str, ...] = ()
    allowed_origins: tuple[str, ...] = ()
    allowed_civics: tuple[str, ...] = ()
    forbidden_civics: tuple[str, ...] = ()
    forbidden_ethics: tuple[str, ...] = ()
    cost: int = 0
    opposites: tuple[str, ...] = ()
    gfx_key: str | None = None
