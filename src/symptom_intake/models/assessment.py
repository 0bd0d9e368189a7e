"""Assessment result models — the terminal output of a session.

The emergency invariant is enforced by a validator: an assessment that
carries ``emergency_warning=True`` must have ``severity="emergency"`` and no
possible conditions.  The engine never attempts a differential diagnosis
once an emergency is declared.
"""

import enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class Severity(str, enum.Enum):
    """Coarse severity buckets, ordered from least to most severe."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    EMERGENCY = "emergency"


class PossibleCondition(BaseModel):
    """One entry in the ranked differential."""

    name: str
    probability: float = Field(ge=0.0, le=1.0)
    description: str = ""


class AssessmentResult(BaseModel):
    """Structured severity assessment for a completed questionnaire."""

    severity: Severity
    possible_conditions: List[PossibleCondition] = []
    recommendations: List[str] = []
    emergency_warning: bool = False
    emergency_message: Optional[str] = None
    follow_up_advice: str
    red_flags: List[str] = []
    self_care: List[str] = []

    @model_validator(mode="after")
    def _emergency_has_no_differential(self):
        if self.emergency_warning:
            if self.possible_conditions:
                raise ValueError("emergency assessments must not list possible conditions")
            if self.severity != Severity.EMERGENCY:
                raise ValueError("emergency assessments must have severity 'emergency'")
        return self
