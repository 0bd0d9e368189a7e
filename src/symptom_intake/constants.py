"""Questionnaire constants shared across the SDK.

These values are referenced by the flow controller, detectors, and the
assessment engine.  Several can be overridden via environment variables so
that deployments can adjust limits without code changes.
"""

import os

# Hard cap on answers per session.  The flow controller stops issuing
# questions once this many responses exist.
# Overridable via INTAKE_MAX_QUESTIONS env var.
MAX_QUESTIONS = int(os.getenv("INTAKE_MAX_QUESTIONS", "8"))

# Languages the prompts and fixed fixtures exist for.
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "es")
DEFAULT_LANGUAGE = os.getenv("INTAKE_DEFAULT_LANGUAGE", "en")

# Well-known question ids.
INITIAL_QUESTION_ID = "initial_symptom"
EMERGENCY_QUESTION_ID = "emergency_symptoms"
AGE_QUESTION_ID = "age"
GENDER_QUESTION_ID = "gender"

# Sentinel option value on the emergency question meaning "none of the above".
NONE_SENTINEL = "none"

# Human-readable labels used by the context builder.  Every other question id
# is rendered verbatim.
CONTEXT_LABELS: dict[str, str] = {
    INITIAL_QUESTION_ID: "Primary complaint",
    AGE_QUESTION_ID: "Patient age",
    GENDER_QUESTION_ID: "Gender",
}

# Question-id substrings that mark a numeric severity/pain scale answer.
SEVERITY_ID_MARKERS: tuple[str, ...] = ("severity", "pain", "scale")

# Numeric scale thresholds (inclusive lower bounds).
SEVERE_SCALE_THRESHOLD = 8
MODERATE_SCALE_THRESHOLD = 6

# Initial topics that open the session with an image upload instead of a
# generated question, mapped to the image category sent to the analyzer.
# "general" is a plain-text home topic, so the generic image category is
# reached through "medical_image".
IMAGE_TOPICS: dict[str, str] = {
    "mri": "mri",
    "ct_scan": "ct_scan",
    "xray": "xray",
    "ultrasound": "ultrasound",
    "pathology": "pathology",
    "medical_image": "general",
}

# Attempts at producing a non-duplicate follow-up question.
MAX_QUESTION_ATTEMPTS = 3

# Default number of generated answer options.
DEFAULT_MAX_OPTIONS = 6


def resolve_language(language: str | None) -> str:
    """Normalise a language code, falling back to the default for unknown codes."""
    if language:
        code = language.lower().split("-")[0]
        if code in SUPPORTED_LANGUAGES:
            return code
    return DEFAULT_LANGUAGE if DEFAULT_LANGUAGE in SUPPORTED_LANGUAGES else "en"
