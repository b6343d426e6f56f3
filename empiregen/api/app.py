"""
FastAPI Application - REST API for the empire generator.

Endpoints:
    POST   /api/empire/generate     Generate an empire (new or reset session)
    POST   /api/empire/reroll       Spend the session's reroll on one category
    GET    /api/health              Health check

All responses are JSON with explicit Pydantic schemas. Engine failures
come back as ErrorResponse bodies with a machine-readable error_code.

Run with:
    EMPIREGEN_GAME_PATH=/path/to/game uvicorn empiregen.api.app:create_app --factory
"""

from typing import Optional, Union

from .. import __version__
from ..config import Settings

# error_code -> HTTP status
_STATUS_CODES = {
    "SESSION_NOT_FOUND": 404,
    "REROLL_UNAVAILABLE": 409,
    "NO_ALTERNATIVES": 422,
    "GENERATION_FAILED": 503,
    "VALIDATION_ERROR": 400,
}


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Body, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install empiregen[api]"
        )

    from .service import APIService
    from .schemas import (
        EmpireResponse,
        ErrorResponse,
        GenerateRequest,
        HealthResponse,
        RerollRequest,
    )

    settings = settings or Settings.from_env()

    if service is None:
        if not settings.game_path:
            raise ValueError("EMPIREGEN_GAME_PATH must point at a game installation")
        from ..catalog import load_catalog
        service = APIService(catalog=load_catalog(settings.game_path), config=settings.generator)

    app = FastAPI(
        title="Empiregen API",
        description="Random, rule-consistent empire generation with one reroll per session.",
        version=__version__,
        docs_url=None if settings.is_production else "/api/docs",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def respond(response) -> Union[EmpireResponse, JSONResponse]:
        if isinstance(response, ErrorResponse):
            return JSONResponse(
                status_code=_STATUS_CODES.get(response.error_code.value, 400),
                content=response.model_dump(mode="json"),
            )
        return response

    @app.post(
        "/api/empire/generate",
        response_model=EmpireResponse,
        responses={503: {"model": ErrorResponse}},
        tags=["Empire"],
        summary="Generate a random empire",
    )
    async def generate(request: Optional[GenerateRequest] = Body(None)):
        """
        Generate a new empire.

        Passing an existing `session_id` resets that session, making its
        reroll available again.
        """
        return respond(service.generate(request.session_id if request else None))

    @app.post(
        "/api/empire/reroll",
        response_model=EmpireResponse,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            422: {"model": ErrorResponse},
        },
        tags=["Empire"],
        summary="Reroll one category",
    )
    async def reroll(
        request: RerollRequest,
        session_id: str = Query(..., description="Session to reroll"),
    ):
        """
        Spend the session's single reroll on one category.

        Every category becomes unavailable afterwards, whichever was chosen.
        """
        return respond(service.reroll(session_id, request))

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="empiregen",
            version=__version__,
            catalog=service.catalog.summary(),
        )

    return app
