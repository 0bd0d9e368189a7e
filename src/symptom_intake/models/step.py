"""Step models — the contract between the questionnaire service and callers.

Step types:
  - QuestionStep: present one question and wait for the answer
  - AssessmentStep: session ended with a result

``AssessmentStep.type`` is "emergency" for the short-circuit path and
"assessment" for a regular completion, so callers can tell them apart
without inspecting the result.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from symptom_intake.models.assessment import AssessmentResult
from symptom_intake.models.question import Question


class QuestionStep(BaseModel):
    """Present ``question`` to the patient."""

    type: Literal["question"] = "question"
    session_id: str
    question_number: int
    question: Question


class AssessmentStep(BaseModel):
    """Session finished with ``result``."""

    type: Literal["assessment", "emergency"]
    session_id: str
    result: AssessmentResult


# Callers can match on step.type to dispatch rendering logic.
Step = QuestionStep | AssessmentStep


class SessionInfo(BaseModel):
    """Public view of session state for API consumers."""

    session_id: str
    language: str
    question_count: int
    current_question_id: Optional[str] = None
    completed: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
