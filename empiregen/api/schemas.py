"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the generator.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- REROLL_UNAVAILABLE: The session's single reroll has been spent
- NO_ALTERNATIVES: The category has no valid replacement for this empire
- GENERATION_FAILED: A generation step ran out of candidates
- VALIDATION_ERROR: Malformed request (e.g. trait reroll without a trait id)
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.reroll import RerollCategory
from ..engine_core.result import GeneratedEmpire


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    REROLL_UNAVAILABLE = "REROLL_UNAVAILABLE"
    NO_ALTERNATIVES = "NO_ALTERNATIVES"
    GENERATION_FAILED = "GENERATION_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class SecondarySpeciesInfo(BaseModel):
    """Secondary species for display."""
    title: Optional[str] = None
    species_class: str
    enforced_traits: list[str] = Field(default_factory=list)
    additional_traits: list[str] = Field(default_factory=list)
    trait_points_used: int = 0
    trait_points_budget: int = 2
    max_trait_picks: int = 5


class EmpireInfo(BaseModel):
    """A generated empire."""
    ethics: list[str]
    authority: str
    civics: list[str] = Field(description="Exactly two, in slot order")
    origin: str
    species_archetype: str
    species_class: str
    species_traits: list[str] = Field(description="Enforced traits first")
    enforced_trait_ids: list[str] = Field(default_factory=list)
    trait_points_used: int
    trait_points_budget: int
    homeworld: str
    habitability_preference: str
    shipset: str
    leader_class: str
    leader_traits: list[str] = Field(default_factory=list)
    secondary_species: Optional[SecondarySpeciesInfo] = None

    @classmethod
    def from_empire(cls, empire: GeneratedEmpire) -> "EmpireInfo":
        return cls.model_validate(empire.to_dict())


# =============================================================================
# Request Models
# =============================================================================

class GenerateRequest(BaseModel):
    """Generate a new empire, optionally resetting an existing session."""
    session_id: Optional[str] = Field(None, description="Reuse this session if it exists")


class RerollRequest(BaseModel):
    """Reroll one category of a session's empire."""
    category: RerollCategory
    trait_id: Optional[str] = Field(None, description="Required for the 'trait' category")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")


class EmpireResponse(BaseModel):
    """A session's current empire and what can still be rerolled."""
    session_id: str
    empire: EmpireInfo
    reroll_used: bool = False
    rerolls_available: dict[str, bool] = Field(
        default_factory=dict,
        description="Per category; all true until the session's one reroll is spent",
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    catalog: dict[str, int] = Field(default_factory=dict)
