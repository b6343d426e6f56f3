"""
Configuration - Generation tuning and environment settings.

GeneratorConfig holds the budgets and caps used by generation and reroll.
Settings reads deployment configuration from environment variables:

    EMPIREGEN_GAME_PATH        Game install directory to load the catalog from
    EMPIREGEN_MAX_ATTEMPTS     Attempt cap for reroll fallbacks (default 50)
    EMPIREGEN_GESTALT_CHANCE   Probability of a gestalt empire (default 0.30)
    EMPIREGEN_ENV              development / production
    ALLOWED_ORIGINS            Comma-separated CORS origins for the API
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class GeneratorConfig:
    ethics_budget: int = 3
    civic_count: int = 2
    gestalt_chance: float = 0.30
    max_attempts: int = 50

    # Secondary species trait fill
    secondary_trait_budget: int = 2
    secondary_max_traits: int = 5

    # Luminary (extended leader trait) mode
    luminary_budget: int = 1
    luminary_max_picks: int = 3

    leader_classes: tuple[str, ...] = ("official", "commander", "scientist")

    def __post_init__(self):
        if not 0.0 <= self.gestalt_chance <= 1.0:
            raise ValueError(f"gestalt_chance must be in [0, 1], got {self.gestalt_chance}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


@dataclass
class Settings:
    game_path: str | None = None
    env: str = "development"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls, environ=None) -> Settings:
        environ = os.environ if environ is None else environ

        generator = GeneratorConfig()
        if "EMPIREGEN_MAX_ATTEMPTS" in environ:
            generator = replace(generator, max_attempts=int(environ["EMPIREGEN_MAX_ATTEMPTS"]))
        if "EMPIREGEN_GESTALT_CHANCE" in environ:
            generator = replace(generator, gestalt_chance=float(environ["EMPIREGEN_GESTALT_CHANCE"]))

        return cls(
            game_path=environ.get("EMPIREGEN_GAME_PATH") or None,
            env=environ.get("EMPIREGEN_ENV", "development"),
            allowed_origins=[o.strip() for o in environ.get("ALLOWED_ORIGINS", "*").split(",")],
            generator=generator,
        )
