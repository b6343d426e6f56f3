"""Entity catalog - typed game entities extracted from parsed game data."""

from .entities import (
    BIOLOGICAL,
    GESTALT_AUTHORITIES,
    GESTALT_ETHIC,
    HIVE_MIND,
    MACHINE_INTELLIGENCE,
    Authority,
    Civic,
    Ethic,
    GraphicalCulture,
    LeaderTrait,
    Origin,
    PlanetClass,
    SecondarySpeciesConfig,
    SpeciesArchetype,
    SpeciesClass,
    SpeciesTrait,
)
from .catalog import (
    Catalog,
    CatalogValidationError,
    ValidationResult,
    load_catalog,
    validate_catalog,
)

__all__ = [
    "BIOLOGICAL",
    "GESTALT_AUTHORITIES",
    "GESTALT_ETHIC",
    "HIVE_MIND",
    "MACHINE_INTELLIGENCE",
    "Authority",
    "Civic",
    "Ethic",
    "GraphicalCulture",
    "LeaderTrait",
    "Origin",
    "PlanetClass",
    "SecondarySpeciesConfig",
    "SpeciesArchetype",
    "SpeciesClass",
    "SpeciesTrait",
    "Catalog",
    "CatalogValidationError",
    "ValidationResult",
    "load_catalog",
    "validate_catalog",
]
