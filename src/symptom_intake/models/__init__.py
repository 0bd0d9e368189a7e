"""Public model re-exports for symptom_intake.

Consumers should import from ``symptom_intake.models`` rather than
reaching into sub-modules directly.
"""

# --- Questions ---
from symptom_intake.models.question import (
    AIMultipleChoiceQuestion,
    AISingleChoiceQuestion,
    AITextInputQuestion,
    AnswerContext,
    BaseQuestion,
    BodyPartSelectorQuestion,
    BooleanQuestion,
    ImageUploadConfig,
    ImageUploadQuestion,
    MultipleChoiceQuestion,
    NumberInputQuestion,
    Question,
    QuestionKind,
    QuestionOption,
    ScaleQuestion,
    SingleChoiceQuestion,
    TextInputQuestion,
    question_mapper,
)

# --- Answers / session ---
from symptom_intake.models.response import (
    ImageData,
    QuestionnaireSession,
    QuestionResponse,
)

# --- Assessment ---
from symptom_intake.models.assessment import (
    AssessmentResult,
    PossibleCondition,
    Severity,
)

# --- Gateway ---
from symptom_intake.models.gateway import (
    TIER_PROFILES,
    CapabilityTier,
    ChatMessage,
    GenerationOptions,
    TierProfile,
)

# --- Image analysis ---
from symptom_intake.models.image import ImageAnalysis, ImageAnalysisRequest

# --- Steps ---
from symptom_intake.models.step import AssessmentStep, QuestionStep, SessionInfo, Step

__all__ = [
    # Questions
    "AIMultipleChoiceQuestion",
    "AISingleChoiceQuestion",
    "AITextInputQuestion",
    "AnswerContext",
    "BaseQuestion",
    "BodyPartSelectorQuestion",
    "BooleanQuestion",
    "ImageUploadConfig",
    "ImageUploadQuestion",
    "MultipleChoiceQuestion",
    "NumberInputQuestion",
    "Question",
    "QuestionKind",
    "QuestionOption",
    "ScaleQuestion",
    "SingleChoiceQuestion",
    "TextInputQuestion",
    "question_mapper",
    # Answers / session
    "ImageData",
    "QuestionnaireSession",
    "QuestionResponse",
    # Assessment
    "AssessmentResult",
    "PossibleCondition",
    "Severity",
    # Gateway
    "TIER_PROFILES",
    "CapabilityTier",
    "ChatMessage",
    "GenerationOptions",
    "TierProfile",
    # Image analysis
    "ImageAnalysis",
    "ImageAnalysisRequest",
    # Steps
    "AssessmentStep",
    "QuestionStep",
    "SessionInfo",
    "Step",
]
