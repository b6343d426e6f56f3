"""
API Service - Business logic layer between API and engine.

The service:
1. Generates empires and keeps one session per user
2. Applies the session's single reroll
3. Turns engine failures into structured ErrorResponses

It never raises engine errors to its caller. This layer is
framework-agnostic (can be used with FastAPI, a CLI, tests, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from ..catalog.catalog import Catalog
from ..config import GeneratorConfig
from ..engine_core import (
    EmpireGenerator,
    GenerationFailure,
    RerollCategory,
    RerollEngine,
    RerollFailure,
    RerollUnavailable,
)
from ..session import GenerationSession, SessionManager
from .schemas import (
    EmpireInfo,
    EmpireResponse,
    ErrorCode,
    ErrorResponse,
    RerollRequest,
)

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService(catalog)

        response = service.generate()
        response = service.reroll(response.session_id, RerollRequest(category="civic1"))
    """
    catalog: Catalog
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    rng: random.Random = field(default_factory=random.Random)
    session_manager: SessionManager = field(default_factory=SessionManager)

    def __post_init__(self):
        self.generator = EmpireGenerator(self.catalog, self.config, self.rng)
        self.reroll_engine = RerollEngine(self.generator)

    def generate(self, session_id: str | None = None) -> EmpireResponse | ErrorResponse:
        """
        Generate a new empire.

        An existing session is reset (reroll available again); an unknown
        or missing session id starts a new session.
        """
        try:
            empire = self.generator.generate()
        except GenerationFailure as e:
            logger.warning("Generation failed at %s: %s", e.step, e.message)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.GENERATION_FAILED,
                details={"step": e.step},
            )

        session = self.session_manager.get_session(session_id) if session_id else None
        if session is not None:
            session.reset(empire)
        else:
            session = self.session_manager.create_session(empire)
        return self._to_response(session)

    def reroll(self, session_id: str, request: RerollRequest) -> EmpireResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if session is None:
            return ErrorResponse(
                error=f"Session {session_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )

        if request.category == RerollCategory.TRAIT and not request.trait_id:
            return ErrorResponse(
                error="trait_id is required to reroll a single trait",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        try:
            self.reroll_engine.reroll(session, request.category, request.trait_id)
        except RerollUnavailable as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.REROLL_UNAVAILABLE,
                details={"category": e.category},
            )
        except RerollFailure as e:
            logger.info("Reroll of %s failed: %s", e.category, e.message)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.NO_ALTERNATIVES,
                details={"category": e.category},
            )
        return self._to_response(session)

    def get_session(self, session_id: str) -> EmpireResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if session is None:
            return ErrorResponse(
                error=f"Session {session_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._to_response(session)

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def _to_response(self, session: GenerationSession) -> EmpireResponse:
        return EmpireResponse(
            session_id=session.session_id,
            empire=EmpireInfo.from_empire(session.empire),
            reroll_used=session.reroll_used,
            rerolls_available=session.reroll_availability(),
        )
