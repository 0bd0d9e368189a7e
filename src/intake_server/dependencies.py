"""FastAPI dependency injection — provides the service singleton.

The ``QuestionnaireService`` is built once in the lifespan handler and
stashed on ``app.state``; routes receive it through ``get_service``.
"""

from fastapi import Request

from symptom_intake.service import QuestionnaireService


def get_service(request: Request) -> QuestionnaireService:
    """Return the service singleton from ``app.state``."""
    return request.app.state.service
