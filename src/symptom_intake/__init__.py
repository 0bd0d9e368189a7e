"""symptom_intake — adaptive symptom questionnaire and assessment SDK.

Public API:
    QuestionnaireService   — in-memory session registry driving the flow
    QuestionFlowController — issues initial, follow-up and emergency questions
    AnswerOptionGenerator  — generated answer options and suggestions
    AssessmentEngine       — turns a response list into an AssessmentResult
    EmergencyDetector      — structural + lexical emergency check
    SeverityClassifier     — severity bucket used for tier selection
    ContextBuilder         — renders responses into prompt context
    PromptManager          — Jinja2 prompt templates

Gateway:
    TextGenerationGateway  — ABC for the text-generation service
    OpenAITextGateway      — AsyncOpenAI client for chat-completions endpoints
    ImageAnalyzer          — ABC for the image-analysis collaborator

Step models:
    QuestionStep           — step: present one question
    AssessmentStep         — step: session ended (assessment or emergency)
    SessionInfo            — public view of session state
"""

from symptom_intake.answers import AnswerOptionGenerator
from symptom_intake.assessment import AssessmentEngine
from symptom_intake.context import ContextBuilder
from symptom_intake.emergency import EmergencyDetector
from symptom_intake.errors import (
    AssessmentUnavailableError,
    GatewayUnavailableError,
    IntakeError,
    InvalidResponseError,
    MalformedResponseError,
    SessionBoundsExceededError,
    SessionConflictError,
    SessionNotFoundError,
)
from symptom_intake.flow import QuestionFlowController
from symptom_intake.gateway import GatewaySettings, OpenAITextGateway, load_gateway_settings
from symptom_intake.interfaces import ImageAnalyzer, TextGenerationGateway
from symptom_intake.keywords import KeywordConfig, load_keyword_config
from symptom_intake.models.step import AssessmentStep, QuestionStep, SessionInfo, Step
from symptom_intake.prompt import PromptManager
from symptom_intake.service import QuestionnaireService
from symptom_intake.severity import SeverityClassifier, select_tier

__all__ = [
    # Orchestration
    "QuestionnaireService",
    "QuestionFlowController",
    "AnswerOptionGenerator",
    "AssessmentEngine",
    # Detectors & helpers
    "ContextBuilder",
    "EmergencyDetector",
    "SeverityClassifier",
    "select_tier",
    "KeywordConfig",
    "load_keyword_config",
    "PromptManager",
    # Gateway
    "TextGenerationGateway",
    "OpenAITextGateway",
    "GatewaySettings",
    "load_gateway_settings",
    "ImageAnalyzer",
    # Steps
    "AssessmentStep",
    "QuestionStep",
    "SessionInfo",
    "Step",
    # Errors
    "IntakeError",
    "InvalidResponseError",
    "GatewayUnavailableError",
    "MalformedResponseError",
    "SessionNotFoundError",
    "SessionBoundsExceededError",
    "SessionConflictError",
    "AssessmentUnavailableError",
]
