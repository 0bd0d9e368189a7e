"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from intake_server.routes.answers import router as answers_router
from intake_server.routes.assessment import router as assessment_router
from intake_server.routes.questions import router as questions_router
from intake_server.routes.sessions import router as sessions_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(questions_router, prefix=API_PREFIX)
    app.include_router(answers_router, prefix=API_PREFIX)
    app.include_router(assessment_router, prefix=API_PREFIX)
