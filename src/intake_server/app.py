"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that builds the gateway and the QuestionnaireService
    once
  - CORS middleware
  - Global exception handlers (SDK IntakeError → 404/409/422/503)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness checks

The ``cli()`` function is the ``intake-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symptom_intake.errors import IntakeError
from symptom_intake.gateway import OpenAITextGateway, load_gateway_settings
from symptom_intake.interfaces import ImageAnalyzer, TextGenerationGateway
from symptom_intake.keywords import load_keyword_config
from symptom_intake.service import QuestionnaireService

from intake_server.config import ServerSettings, load_settings
from intake_server.errors import generic_error_handler, intake_error_handler
from intake_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Use the injected gateway, or build an ``OpenAITextGateway`` from
         ``GATEWAY_*`` env vars
      2. Load keyword lists and build the ``QuestionnaireService``
      3. Stash it on ``app.state`` for dependency injection

    Shutdown:
      1. Close the OpenAI gateway client if it was built here
    """
    settings: ServerSettings = app.state.settings

    gateway: TextGenerationGateway | None = app.state.gateway
    owned_gateway: OpenAITextGateway | None = None
    if gateway is None:
        owned_gateway = OpenAITextGateway(load_gateway_settings())
        gateway = owned_gateway
        logger.info("OpenAI gateway initialised")

    keywords = load_keyword_config(settings.keywords_path)
    app.state.service = QuestionnaireService(
        gateway,
        image_analyzer=app.state.image_analyzer,
        keywords=keywords,
    )

    yield

    # --- Shutdown ---
    if owned_gateway is not None:
        await owned_gateway.aclose()
        logger.info("OpenAI gateway closed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    *,
    gateway: TextGenerationGateway | None = None,
    image_analyzer: ImageAnalyzer | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application.

    ``gateway`` and ``image_analyzer`` let tests and embedders inject their
    own collaborators.
    """
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Symptom Intake API Server",
        description="REST API for the adaptive symptom questionnaire",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Read by the lifespan handler
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.image_analyzer = image_analyzer

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(IntakeError, intake_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness check: the service is built once startup has finished."""
        if getattr(app.state, "service", None) is None:
            return {"status": "starting"}
        return {"status": "ok"}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn intake_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``intake-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "intake_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
