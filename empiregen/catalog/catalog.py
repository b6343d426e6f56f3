"""
Catalog - Immutable snapshot of every player-selectable entity.

Built once from a game directory and shared read-only by every generator,
reroll engine and session. Reloading means building a new Catalog; sessions
holding the old one are unaffected.

Validation checks:
1. Random weights are non-negative
2. Ids are unique per entity kind
3. Species classes reference known archetypes
4. Enforced trait ids and fixed homeworlds exist (warnings only)
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path

from ..parser.loader import GameFiles
from .entities import (
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
from . import extractors

logger = logging.getLogger(__name__)


class CatalogValidationError(Exception):
    """Raised when catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class Catalog:
    ethics: tuple[Ethic, ...] = ()
    authorities: tuple[Authority, ...] = ()
    civics: tuple[Civic, ...] = ()
    origins: tuple[Origin, ...] = ()
    archetypes: tuple[SpeciesArchetype, ...] = ()
    species_classes: tuple[SpeciesClass, ...] = ()
    species_traits: tuple[SpeciesTrait, ...] = ()
    planet_classes: tuple[PlanetClass, ...] = ()
    graphical_cultures: tuple[GraphicalCulture, ...] = ()
    leader_traits: tuple[LeaderTrait, ...] = ()

    @classmethod
    def from_game_files(cls, files: GameFiles) -> Catalog:
        return cls(
            ethics=tuple(extractors.extract_ethics(files.get("ethics"))),
            authorities=tuple(extractors.extract_authorities(files.get("authorities"))),
            civics=tuple(extractors.extract_civics(files.get("civics"))),
            origins=tuple(extractors.extract_origins(files.get("civics"))),
            archetypes=tuple(extractors.extract_archetypes(files.get("species_archetypes"))),
            species_classes=tuple(extractors.extract_species_classes(files.get("species_classes"))),
            species_traits=tuple(extractors.extract_species_traits(files.get("traits"))),
            planet_classes=tuple(extractors.extract_planet_classes(files.get("planet_classes"))),
            graphical_cultures=tuple(
                extractors.extract_graphical_cultures(files.get("graphical_cultures"))
            ),
            # Leader traits live beside species traits
            leader_traits=tuple(extractors.extract_leader_traits(files.get("traits"))),
        )

    def find_archetype(self, archetype_id: str) -> SpeciesArchetype | None:
        return next((a for a in self.archetypes if a.id == archetype_id), None)

    def find_trait(self, trait_id: str) -> SpeciesTrait | None:
        return next((t for t in self.species_traits if t.id == trait_id), None)

    def find_origin(self, origin_id: str) -> Origin | None:
        return next((o for o in self.origins if o.id == origin_id), None)

    def find_civic(self, civic_id: str) -> Civic | None:
        return next((c for c in self.civics if c.id == civic_id), None)

    def find_authority(self, authority_id: str) -> Authority | None:
        return next((a for a in self.authorities if a.id == authority_id), None)

    def find_ethic(self, ethic_id: str) -> Ethic | None:
        return next((e for e in self.ethics if e.id == ethic_id), None)

    def summary(self) -> dict[str, int]:
        return {
            "ethics": len(self.ethics),
            "authorities": len(self.authorities),
            "civics": len(self.civics),
            "origins": len(self.origins),
            "archetypes": len(self.archetypes),
            "species_classes": len(self.species_classes),
            "species_traits": len(self.species_traits),
            "planet_classes": len(self.planet_classes),
            "graphical_cultures": len(self.graphical_cultures),
            "leader_traits": len(self.leader_traits),
        }


def validate_catalog(catalog: Catalog) -> ValidationResult:
    """Validate a catalog. Errors make it unusable, warnings do not."""
    errors: list[str] = []
    warnings: list[str] = []

    weighted = [
        *catalog.ethics, *catalog.authorities, *catalog.civics, *catalog.origins,
    ]
    for entity in weighted:
        if entity.random_weight < 0:
            errors.append(
                f"{type(entity).__name__} '{entity.id}' has negative random weight "
                f"{entity.random_weight}"
            )

    for kind, entities in (
        ("ethic", catalog.ethics),
        ("authority", catalog.authorities),
        ("civic", catalog.civics),
        ("origin", catalog.origins),
        ("archetype", catalog.archetypes),
        ("species trait", catalog.species_traits),
    ):
        for entity_id, count in Counter(e.id for e in entities).items():
            if count > 1:
                errors.append(f"Duplicate {kind} id '{entity_id}' ({count} definitions)")

    archetype_ids = {a.id for a in catalog.archetypes}
    for species_class in catalog.species_classes:
        if species_class.archetype not in archetype_ids:
            warnings.append(
                f"Species class '{species_class.id}' references unknown archetype "
                f"'{species_class.archetype}'"
            )

    trait_ids = {t.id for t in catalog.species_traits}
    for owner in (*catalog.origins, *catalog.civics):
        for trait_id in owner.enforced_trait_ids:
            if trait_id not in trait_ids:
                warnings.append(f"'{owner.id}' enforces unknown trait '{trait_id}'")

    planet_ids = {p.id for p in catalog.planet_classes}
    for origin in catalog.origins:
        if origin.fixed_homeworld and origin.fixed_homeworld not in planet_ids:
            warnings.append(
                f"Origin '{origin.id}' fixes non-starting planet class '{origin.fixed_homeworld}'"
            )

    if not catalog.ethics:
        warnings.append("No ethics defined - generation will fail")
    if not catalog.graphical_cultures:
        warnings.append("No selectable shipsets defined")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def load_catalog(game_path: str | Path, validate: bool = True) -> Catalog:
    """
    Load and extract the catalog for a game installation.

    Raises CatalogValidationError if validate=True and errors exist.
    """
    catalog = Catalog.from_game_files(GameFiles.load(game_path))
    logger.info("Catalog loaded: %s", catalog.summary())

    if validate:
        result = validate_catalog(catalog)
        for warning in result.warnings:
            logger.debug("Catalog warning: %s", warning)
        if not result.valid:
            raise CatalogValidationError(result.errors)

    return catalog
