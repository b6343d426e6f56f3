"""
API Module - Front-end interface.

Exposes the generator via a REST API. A front end:
1. Generates an empire (starting or resetting a session)
2. Optionally spends the session's one reroll on a category
3. Shows which rerolls are still available

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    GenerateRequest,
    RerollRequest,
    # Responses
    EmpireResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    EmpireInfo,
    SecondarySpeciesInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "GenerateRequest",
    "RerollRequest",
    # Responses
    "EmpireResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "EmpireInfo",
    "SecondarySpeciesInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
