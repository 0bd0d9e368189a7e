"""Stateless question endpoints — generate a question, emergency check.

These mirror the flow controller's operations for clients that keep the
response list themselves instead of using a server-side session.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from symptom_intake.models.question import Question
from symptom_intake.models.response import QuestionResponse
from symptom_intake.service import QuestionnaireService

from intake_server.dependencies import get_service

router = APIRouter(tags=["questions"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class GenerateQuestionRequest(BaseModel):
    """Body for POST /questions."""
    type: Literal["initial", "next", "emergency"]
    language: str = "en"
    topic: Optional[str] = None
    previous_responses: List[QuestionResponse] = []
    question_count: int = 0


class QuestionResponseBody(BaseModel):
    # None means "stop asking and assess"
    question: Optional[Question] = None


class EmergencyCheckRequest(BaseModel):
    responses: List[QuestionResponse]
    language: str = "en"


class EmergencyCheckResponse(BaseModel):
    needs_emergency_check: bool


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/questions")
async def generate_question(
    body: GenerateQuestionRequest,
    service: QuestionnaireService = Depends(get_service),
) -> QuestionResponseBody:
    """Generate the initial, next, or emergency question."""
    flow = service.flow
    if body.type == "initial":
        question = await flow.issue_initial_question(body.language, body.topic)
    elif body.type == "next":
        question = await flow.issue_next_question(
            body.previous_responses, body.question_count, body.language,
        )
    else:
        question = flow.issue_emergency_question(body.language)
    return QuestionResponseBody(question=question)


@router.post("/emergency-check")
async def emergency_check(
    body: EmergencyCheckRequest,
    service: QuestionnaireService = Depends(get_service),
) -> EmergencyCheckResponse:
    """Whether the emergency screening question should be asked now."""
    needed = await service.flow.should_issue_emergency_question(
        body.responses, body.language,
    )
    return EmergencyCheckResponse(needs_emergency_check=needed)
