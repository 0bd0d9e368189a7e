"""Answer generation endpoint — options, suggestions, symptom options."""

from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from symptom_intake.constants import DEFAULT_MAX_OPTIONS
from symptom_intake.models.question import QuestionOption
from symptom_intake.models.response import QuestionResponse
from symptom_intake.service import QuestionnaireService

from intake_server.dependencies import get_service

router = APIRouter(tags=["answers"])


class GenerateAnswersRequest(BaseModel):
    """Body for POST /answers.

    ``request_type`` selects the operation:
      - options: ``question_text`` and ``question_type`` required
      - suggestions: ``question_text`` and ``current_input`` required
      - symptoms: optional ``body_part``, ``symptom_type`` and ``query``
    """
    request_type: Literal["options", "suggestions", "symptoms"] = "options"
    question_text: str = ""
    question_type: str = ""
    previous_responses: List[QuestionResponse] = []
    max_options: int = Field(default=DEFAULT_MAX_OPTIONS, ge=1)
    current_input: str = ""
    body_part: Optional[str] = None
    symptom_type: Optional[str] = None
    query: Optional[str] = None
    language: str = "en"


class GenerateAnswersResponse(BaseModel):
    result: Union[List[QuestionOption], List[str]]


@router.post("/answers")
async def generate_answers(
    body: GenerateAnswersRequest,
    service: QuestionnaireService = Depends(get_service),
) -> GenerateAnswersResponse:
    answers = service.answers
    if body.request_type == "options":
        result = await answers.generate_answer_options(
            body.question_text,
            body.question_type,
            body.previous_responses,
            body.max_options,
            body.language,
        )
    elif body.request_type == "suggestions":
        result = await answers.generate_suggestions(
            body.question_text,
            body.current_input,
            body.previous_responses,
            body.max_options,
            body.language,
        )
    else:
        result = await answers.generate_symptom_options(
            body.body_part, body.symptom_type, body.language, body.query,
        )
    return GenerateAnswersResponse(result=result)
