"""Answer and session models.

``QuestionResponse`` is frozen: once appended to a session it is never
mutated.  ``QuestionnaireSession`` owns the append-only response list and
enforces the two session invariants:

  - ``len(responses)`` never exceeds ``MAX_QUESTIONS``
  - ``completed=True`` is terminal; nothing may be appended afterwards
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from symptom_intake.constants import EMERGENCY_QUESTION_ID, MAX_QUESTIONS
from symptom_intake.errors import SessionBoundsExceededError
from symptom_intake.models.assessment import AssessmentResult
from symptom_intake.models.question import Question


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# bool is listed first so True/False are never coerced to 1/0.
Answer = Union[bool, int, float, str, List[str]]


class ImageData(BaseModel):
    """Decoded upload attached to an image_upload answer."""

    model_config = ConfigDict(frozen=True)

    payload: str  # base64
    filename: str
    size: int
    media_type: str
    analysis_result: Optional[str] = None


class QuestionResponse(BaseModel):
    """One answer to one issued question."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    answer: Answer
    timestamp: datetime = Field(default_factory=_utcnow)
    image_data: Optional[ImageData] = None


class QuestionnaireSession(BaseModel):
    """Conversation state for one patient.

    Mutated only through :meth:`append_response`, :meth:`issue` and
    :meth:`mark_completed`.
    """

    id: str
    language: str = "en"
    responses: List[QuestionResponse] = []
    current_question: Optional[Question] = None
    emergency_question_issued: bool = False
    completed: bool = False
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None
    result: Optional[AssessmentResult] = None

    @property
    def current_question_id(self) -> str | None:
        if self.current_question is None:
            return None
        return self.current_question.id

    @property
    def question_count(self) -> int:
        return len(self.responses)

    def issue(self, question: Question) -> None:
        """Record ``question`` as the one awaiting an answer."""
        if self.completed:
            raise SessionBoundsExceededError(
                f"Session {self.id} is completed; cannot issue {question.id}"
            )
        self.current_question = question
        if question.id == EMERGENCY_QUESTION_ID:
            self.emergency_question_issued = True

    def append_response(
        self, response: QuestionResponse, *, max_questions: int = MAX_QUESTIONS
    ) -> None:
        """Append an answer, enforcing the terminal and cap invariants."""
        if self.completed:
            raise SessionBoundsExceededError(
                f"Session {self.id} is completed; cannot append {response.question_id}"
            )
        if len(self.responses) >= max_questions:
            raise SessionBoundsExceededError(
                f"Session {self.id} already holds {len(self.responses)} responses "
                f"(max {max_questions})"
            )
        # Rebind rather than mutate in place so earlier snapshots stay intact
        self.responses = [*self.responses, response]
        self.current_question = None

    def mark_completed(self, result: AssessmentResult) -> None:
        """Close the session with its terminal result."""
        if self.completed:
            raise SessionBoundsExceededError(f"Session {self.id} is already completed")
        self.completed = True
        self.completed_at = _utcnow()
        self.current_question = None
        self.result = result
