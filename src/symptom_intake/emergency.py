"""EmergencyDetector — two-stage check run before every assessment call.

  - **Structural**: the fixed emergency question was answered with a
    non-empty list (or a bare string, read as one selection) containing
    anything other than the "none" sentinel.
  - **Lexical**: any free-text answer, on any question, contains one of the
    configured emergency keywords (case-insensitive substring, all
    languages at once).

Either hit is an emergency.  The lexical scan has no negation handling;
"no chest pain" still matches "chest pain".  Over-triggering is preferred to
a missed emergency.
"""

from __future__ import annotations

import logging

from symptom_intake.constants import EMERGENCY_QUESTION_ID, NONE_SENTINEL
from symptom_intake.keywords import KeywordConfig, load_keyword_config
from symptom_intake.models.response import QuestionResponse

logger = logging.getLogger(__name__)


class EmergencyDetector:
    """Structural + lexical emergency check.

    Args:
        keywords: keyword configuration; defaults to the packaged YAML.
    """

    def __init__(self, keywords: KeywordConfig | None = None) -> None:
        config = keywords if keywords is not None else load_keyword_config()
        self._keywords = config.emergency_keywords()

    def is_emergency(self, responses: list[QuestionResponse]) -> bool:
        return self.emergency_structural_hit(responses) or self.emergency_lexical_hit(responses)

    def emergency_structural_hit(self, responses: list[QuestionResponse]) -> bool:
        """True if the emergency question was answered with any real symptom."""
        for response in responses:
            if response.question_id != EMERGENCY_QUESTION_ID:
                continue
            answer = response.answer
            if isinstance(answer, str):
                answer = [answer] if answer.strip() else []
            if isinstance(answer, list) and any(a != NONE_SENTINEL for a in answer):
                return True
        return False

    def emergency_lexical_hit(self, responses: list[QuestionResponse]) -> bool:
        """True if any string answer contains an emergency keyword."""
        return self.matched_keyword(responses) is not None

    def matched_keyword(self, responses: list[QuestionResponse]) -> str | None:
        """Return the first emergency keyword found in a string answer, if any."""
        for response in responses:
            if not isinstance(response.answer, str):
                continue
            text = response.answer.lower()
            for keyword in self._keywords:
                if keyword in text:
                    logger.debug(
                        "Emergency keyword %r matched in response to %s",
                        keyword, response.question_id,
                    )
                    return keyword
        return None
