"""SeverityClassifier and tier selection.

Severity is read from a numeric scale answer when one exists (question id
containing "severity", "pain" or "scale"), otherwise from keyword matches in
free-text answers.  The bucket only picks the gateway tier for the final
assessment; it never changes the shape of the result.
"""

from __future__ import annotations

import logging

from symptom_intake.constants import (
    MODERATE_SCALE_THRESHOLD,
    SEVERE_SCALE_THRESHOLD,
    SEVERITY_ID_MARKERS,
)
from symptom_intake.keywords import KeywordConfig, load_keyword_config
from symptom_intake.models.assessment import Severity
from symptom_intake.models.gateway import TIER_PROFILES, CapabilityTier, TierProfile
from symptom_intake.models.response import QuestionResponse

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    # bool is an int subclass; a yes/no answer is not a scale reading
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def severity_from_scale(score: float) -> Severity:
    """Map a 0-10 scale reading to a bucket.

    Readings below the mild threshold still classify as mild: the scale
    answer is authoritative over keyword matches elsewhere.
    """
    if score >= SEVERE_SCALE_THRESHOLD:
        return Severity.SEVERE
    if score >= MODERATE_SCALE_THRESHOLD:
        return Severity.MODERATE
    return Severity.MILD


class SeverityClassifier:
    """Derives a coarse severity bucket from a response list.

    Args:
        keywords: keyword configuration; defaults to the packaged YAML.
    """

    def __init__(self, keywords: KeywordConfig | None = None) -> None:
        config = keywords if keywords is not None else load_keyword_config()
        self._severe = config.severe_keywords()
        self._moderate = config.moderate_keywords()

    def classify_severity(self, responses: list[QuestionResponse]) -> Severity:
        score = self._scale_reading(responses)
        if score is not None:
            return severity_from_scale(score)

        texts = [r.answer.lower() for r in responses if isinstance(r.answer, str)]
        if any(k in text for text in texts for k in self._severe):
            return Severity.SEVERE
        if any(k in text for text in texts for k in self._moderate):
            return Severity.MODERATE
        return Severity.MILD

    @staticmethod
    def _scale_reading(responses: list[QuestionResponse]) -> float | None:
        """First numeric answer to a severity/pain/scale question, if any."""
        for response in responses:
            qid = response.question_id.lower()
            if any(m in qid for m in SEVERITY_ID_MARKERS) and _is_number(response.answer):
                return float(response.answer)
        return None


def select_tier(severity: Severity) -> TierProfile:
    """Severe and emergency use the capable tier; mild and moderate the fast one."""
    if severity in (Severity.SEVERE, Severity.EMERGENCY):
        return TIER_PROFILES[CapabilityTier.PRIMARY]
    return TIER_PROFILES[CapabilityTier.QUICK]
