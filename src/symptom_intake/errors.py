"""Exception hierarchy for the questionnaire SDK.

Question-generation paths catch ``GatewayUnavailableError`` and
``MalformedResponseError`` and fall back to fixed fixtures.  The assessment
path converts both into ``AssessmentUnavailableError``, which carries a
message that is safe to show to the patient.

The emergency short-circuit is not an error; it is reported as an
``AssessmentStep`` with ``type="emergency"``.
"""

from __future__ import annotations


class IntakeError(Exception):
    """Base class for all SDK errors."""


class GatewayUnavailableError(IntakeError):
    """The text-generation gateway could not be reached or returned nothing."""


class MalformedResponseError(IntakeError):
    """Gateway output could not be parsed, even after the repair pass."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class SessionNotFoundError(IntakeError):
    """No live session exists for the given id."""


class SessionBoundsExceededError(IntakeError):
    """A response was appended to a completed session or past the question cap."""


class SessionConflictError(IntakeError):
    """A response does not answer the session's current question."""


class InvalidResponseError(IntakeError):
    """A response's answer does not fit the kind of question it answers."""


_ASSESSMENT_MESSAGES: dict[str, str] = {
    "en": "Unable to analyze your responses. Please try again or consult a healthcare provider.",
    "es": "No se pudieron analizar tus respuestas. Inténtalo de nuevo o consulta a un profesional de la salud.",
}


class AssessmentUnavailableError(IntakeError):
    """The final assessment could not be produced.

    Never replaced by a synthesized result.  ``user_message`` is the
    patient-facing text in the session language.
    """

    def __init__(self, message: str, *, language: str = "en") -> None:
        super().__init__(message)
        self.language = language

    @property
    def user_message(self) -> str:
        return _ASSESSMENT_MESSAGES.get(self.language, _ASSESSMENT_MESSAGES["en"])
