"""Session endpoints — start, inspect, answer, assess, discard.

Sessions live in memory inside the ``QuestionnaireService``; the session id
returned by ``POST /sessions`` is the only handle a client needs.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from symptom_intake.models.response import QuestionResponse
from symptom_intake.models.step import AssessmentStep, SessionInfo, Step
from symptom_intake.service import QuestionnaireService

from intake_server.dependencies import get_service

router = APIRouter(tags=["sessions"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class CreateSessionRequest(BaseModel):
    """Body for POST /sessions."""
    language: Optional[str] = None
    topic: Optional[str] = None
    session_id: Optional[str] = None


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/sessions", status_code=201)
async def create_session(
    body: CreateSessionRequest,
    service: QuestionnaireService = Depends(get_service),
) -> Step:
    """Start a session and return its first step.

    Returns 201 on success, 409 if ``session_id`` is already in use.
    """
    return await service.start_session(
        body.language, body.topic, session_id=body.session_id,
    )


@router.get("/sessions/{session_id}")
async def get_session(
    session_id: str,
    service: QuestionnaireService = Depends(get_service),
) -> SessionInfo:
    """Get session info.  Raises 404 if the session does not exist."""
    return service.get_session(session_id)


@router.delete("/sessions/{session_id}", status_code=204)
async def discard_session(
    session_id: str,
    service: QuestionnaireService = Depends(get_service),
) -> None:
    """Forget a session.  Returns 204, or 404 if it does not exist."""
    service.discard_session(session_id)


@router.post("/sessions/{session_id}/responses")
async def submit_response(
    session_id: str,
    body: QuestionResponse,
    service: QuestionnaireService = Depends(get_service),
) -> Step:
    """Answer the current question and get the next step.

    409 if the answer is for a question other than the current one or the
    session is completed; 503 if the final assessment could not be produced
    (the answer is kept and ``/assessment`` can be retried).
    """
    return await service.submit_response(session_id, body)


@router.post("/sessions/{session_id}/assessment")
async def assess_session(
    session_id: str,
    service: QuestionnaireService = Depends(get_service),
) -> AssessmentStep:
    """Finish the session now, or retry a failed assessment."""
    return await service.assess(session_id)
