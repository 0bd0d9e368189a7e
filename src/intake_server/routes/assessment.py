"""Stateless analysis endpoint — assess a client-held response list."""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from symptom_intake.models.assessment import AssessmentResult
from symptom_intake.models.response import QuestionResponse
from symptom_intake.service import QuestionnaireService

from intake_server.dependencies import get_service

router = APIRouter(tags=["assessment"])


class AnalyzeRequest(BaseModel):
    """Body for POST /analyze."""
    responses: List[QuestionResponse]
    language: str = "en"


class AnalyzeResponse(BaseModel):
    result: AssessmentResult


@router.post("/analyze")
async def analyze(
    body: AnalyzeRequest,
    service: QuestionnaireService = Depends(get_service),
) -> AnalyzeResponse:
    """Run the assessment engine.  503 when the assessment is unavailable."""
    result = await service.engine.analyze(body.responses, body.language)
    return AnalyzeResponse(result=result)
