"""AssessmentEngine — turns a finished response list into an AssessmentResult.

Order of work in :meth:`AssessmentEngine.analyze`:

  1. Emergency check.  A structural or lexical hit returns the fixed
     emergency result immediately; the gateway is never called.
  2. Severity classification picks the gateway tier (primary for severe,
     quick otherwise).
  3. One gateway call with the rendered context.
  4. Repair-parse the payload and shape it into an ``AssessmentResult``.

A gateway or parse failure raises ``AssessmentUnavailableError``; a result
is never synthesized in its place.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from symptom_intake import fixtures
from symptom_intake.constants import resolve_language
from symptom_intake.context import ContextBuilder
from symptom_intake.emergency import EmergencyDetector
from symptom_intake.errors import (
    AssessmentUnavailableError,
    GatewayUnavailableError,
    MalformedResponseError,
)
from symptom_intake.interfaces import TextGenerationGateway
from symptom_intake.models.assessment import AssessmentResult, PossibleCondition, Severity
from symptom_intake.models.response import QuestionResponse
from symptom_intake.prompt import PromptManager
from symptom_intake.repair import parse_structured
from symptom_intake.severity import SeverityClassifier, select_tier

logger = logging.getLogger(__name__)


def _alias(name: str, camel: str) -> AliasChoices:
    return AliasChoices(name, camel)


class _ConditionPayload(BaseModel):
    name: str
    probability: float = 0.0
    description: str = ""


class _AssessmentPayload(BaseModel):
    """Lenient shape of the gateway's assessment JSON (snake or camel case)."""

    severity: Optional[Severity] = None
    possible_conditions: Optional[List[_ConditionPayload]] = Field(
        default=None, validation_alias=_alias("possible_conditions", "possibleConditions"),
    )
    recommendations: Optional[List[str]] = None
    follow_up_advice: Optional[str] = Field(
        default=None, validation_alias=_alias("follow_up_advice", "followUpAdvice"),
    )
    red_flags: Optional[List[str]] = Field(
        default=None, validation_alias=_alias("red_flags", "redFlags"),
    )
    self_care: Optional[List[str]] = Field(
        default=None, validation_alias=_alias("self_care", "selfCare"),
    )

    @field_validator("severity", mode="before")
    @classmethod
    def _lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _chk(self):
        if self.severity is None and self.possible_conditions is None:
            raise ValueError("payload has neither severity nor possible_conditions")
        return self


def normalize_probability(p: float) -> float:
    """Percentages (values above 1) are rescaled, then clamped to [0, 1]."""
    if p > 1:
        p = p / 100
    return min(max(p, 0.0), 1.0)


def shape_result(
    payload: _AssessmentPayload, fallback_severity: Severity, language: str,
) -> AssessmentResult:
    """Build the final result, filling gaps with the language's defaults."""
    defaults = fixtures.assessment_defaults(language)
    conditions = [
        PossibleCondition(
            name=c.name,
            probability=normalize_probability(c.probability),
            description=c.description,
        )
        for c in payload.possible_conditions or []
    ]
    conditions.sort(key=lambda c: c.probability, reverse=True)

    return AssessmentResult(
        severity=payload.severity or fallback_severity,
        possible_conditions=conditions,
        recommendations=payload.recommendations or defaults["recommendations"],
        emergency_warning=False,
        follow_up_advice=payload.follow_up_advice or defaults["follow_up_advice"],
        red_flags=payload.red_flags if payload.red_flags is not None else defaults["red_flags"],
        self_care=payload.self_care if payload.self_care is not None else defaults["self_care"],
    )


class AssessmentEngine:
    """Produces the terminal assessment for a response list.

    Args:
        gateway: text-generation gateway.
        prompts: prompt renderer; defaults to the packaged templates.
        detector: emergency detector run before any gateway call.
        classifier: severity classifier used for tier selection.
        context_builder: renders responses into prompt context.
    """

    def __init__(
        self,
        gateway: TextGenerationGateway,
        *,
        prompts: PromptManager | None = None,
        detector: EmergencyDetector | None = None,
        classifier: SeverityClassifier | None = None,
        context_builder: ContextBuilder | None = None,
    ) -> None:
        self._gateway = gateway
        self._prompts = prompts or PromptManager()
        self._detector = detector or EmergencyDetector()
        self._classifier = classifier or SeverityClassifier()
        self._context = context_builder or ContextBuilder()

    def emergency_result(
        self, responses: list[QuestionResponse], language: str = "en",
    ) -> AssessmentResult | None:
        """The emergency short-circuit result, or ``None`` if not an emergency."""
        structural = self._detector.emergency_structural_hit(responses)
        if not structural:
            keyword = self._detector.matched_keyword(responses)
            if keyword is None:
                return None
            logger.warning("Emergency keyword %r matched, skipping assessment call", keyword)
        else:
            logger.warning("Emergency symptoms selected, skipping assessment call")
        return fixtures.emergency_result(resolve_language(language), structural=structural)

    async def analyze(
        self, responses: list[QuestionResponse], language: str = "en",
    ) -> AssessmentResult:
        """Assess ``responses``.

        Raises:
            AssessmentUnavailableError: the gateway failed or its output
                could not be parsed, even after repair.
        """
        language = resolve_language(language)
        emergency = self.emergency_result(responses, language)
        if emergency is not None:
            return emergency

        severity = self._classifier.classify_severity(responses)
        profile = select_tier(severity)
        logger.info(
            "Assessing %d responses: severity=%s tier=%s",
            len(responses), severity.value, profile.tier.value,
        )
        messages = self._prompts.assessment(
            context=self._context.build(responses),
            response_count=len(responses),
            language=language,
        )
        try:
            raw = await self._gateway.generate(messages, profile.tier.value, profile.options)
            payload = parse_structured(raw, _AssessmentPayload)
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.error("Assessment failed: %s", exc)
            raise AssessmentUnavailableError(
                f"assessment unavailable: {exc}", language=language,
            ) from exc

        return shape_result(payload, severity, language)
