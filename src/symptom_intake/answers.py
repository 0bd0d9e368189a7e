"""AnswerOptionGenerator — generated options and autocomplete suggestions.

Used for questions issued with ``generate_answers=True``.  All three
operations run on the light tier and tolerate gateway failure:

  - answer options → fixed fallback options for the question's category
  - suggestions → empty list
  - symptom options → empty list

Gateway output may be a bare array or an ``{"options": [...]}`` /
``{"suggestions": [...]}`` object; truncated arrays go through the repair
parser like any other structured output.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from symptom_intake import fixtures
from symptom_intake.constants import DEFAULT_MAX_OPTIONS, resolve_language
from symptom_intake.context import ContextBuilder
from symptom_intake.errors import GatewayUnavailableError, MalformedResponseError
from symptom_intake.interfaces import TextGenerationGateway
from symptom_intake.models.gateway import TIER_PROFILES, CapabilityTier, ChatMessage
from symptom_intake.models.question import QuestionOption
from symptom_intake.models.response import QuestionResponse
from symptom_intake.prompt import PromptManager
from symptom_intake.repair import parse_structured

logger = logging.getLogger(__name__)

_OPTIONS_ADAPTER = TypeAdapter(list[QuestionOption])
_STRINGS_ADAPTER = TypeAdapter(list[str])

# Minimum typed characters before suggestions are requested
MIN_SUGGESTION_INPUT = 2

# Question-text markers for picking a fallback category, checked in order
_CATEGORY_MARKERS: list[tuple[str, tuple[str, ...]]] = [
    ("severity", ("severe", "severity", "intensity", "how bad", "grave", "intensidad")),
    ("duration", ("how long", "duration", "since when", "cuánto tiempo", "duración")),
    ("frequency", ("how often", "frequency", "frecuencia", "con qué frecuencia")),
]
_CATEGORIES = {"severity", "duration", "frequency", "ai_multiple_choice"}


def fallback_category(question_type: str, question_text: str = "") -> str:
    """Category of fixed options to use when generation fails."""
    if question_type in _CATEGORIES:
        return question_type
    text = question_text.lower()
    for category, markers in _CATEGORY_MARKERS:
        if any(m in text for m in markers):
            return category
    return "default"


def _unwrap_list(value: Any, key: str, raw: str) -> list:
    """Accept a bare array or ``{key: [...]}``."""
    if isinstance(value, dict):
        value = value.get(key)
    if not isinstance(value, list):
        raise MalformedResponseError(f"expected a list of {key}", raw=raw)
    return value


def dedupe_options(options: list[QuestionOption], limit: int) -> list[QuestionOption]:
    """Drop options repeating an earlier label or value, keep at most ``limit``."""
    seen_labels: set[str] = set()
    seen_values: set[str] = set()
    kept: list[QuestionOption] = []
    for option in options:
        if len(kept) >= limit:
            break
        label = option.label.strip().lower()
        if label in seen_labels or option.value in seen_values:
            continue
        seen_labels.add(label)
        seen_values.add(option.value)
        kept.append(option)
    return kept


class AnswerOptionGenerator:
    """Produces answer options and suggestions through the gateway.

    Args:
        gateway: text-generation gateway.
        prompts: prompt renderer; defaults to the packaged templates.
        context_builder: renders earlier responses into prompt context.
    """

    def __init__(
        self,
        gateway: TextGenerationGateway,
        *,
        prompts: PromptManager | None = None,
        context_builder: ContextBuilder | None = None,
    ) -> None:
        self._gateway = gateway
        self._prompts = prompts or PromptManager()
        self._context = context_builder or ContextBuilder()

    async def _generate(self, messages: list[ChatMessage]) -> str:
        profile = TIER_PROFILES[CapabilityTier.LIGHT]
        return await self._gateway.generate(messages, profile.tier.value, profile.options)

    def _parse_options(self, raw: str) -> list[QuestionOption]:
        items = _unwrap_list(parse_structured(raw), "options", raw)
        try:
            return _OPTIONS_ADAPTER.validate_python(items)
        except ValidationError as exc:
            raise MalformedResponseError(f"invalid answer options: {exc}", raw=raw) from exc

    async def generate_answer_options(
        self,
        question_text: str,
        question_type: str,
        responses: list[QuestionResponse] | None = None,
        max_options: int = DEFAULT_MAX_OPTIONS,
        language: str = "en",
    ) -> list[QuestionOption]:
        """Contextual options for a choice question, never empty."""
        language = resolve_language(language)
        messages = self._prompts.answer_options(
            question_text=question_text,
            question_type=question_type,
            context=self._context.build(responses or []),
            max_options=max_options,
            language=language,
        )
        try:
            raw = await self._generate(messages)
            options = dedupe_options(self._parse_options(raw), max_options)
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.warning("Answer option generation failed, using fallback: %s", exc)
            options = []

        if not options:
            category = fallback_category(question_type, question_text)
            logger.info("Using fallback options category=%s", category)
            return fixtures.fallback_options(category, language)
        return options

    async def generate_suggestions(
        self,
        question_text: str,
        current_input: str,
        responses: list[QuestionResponse] | None = None,
        max_suggestions: int = 5,
        language: str = "en",
    ) -> list[str]:
        """Autocomplete suggestions for free-text answers; ``[]`` on failure."""
        if len(current_input.strip()) < MIN_SUGGESTION_INPUT:
            return []
        messages = self._prompts.suggestions(
            question_text=question_text,
            current_input=current_input,
            context=self._context.build(responses or []),
            max_suggestions=max_suggestions,
            language=resolve_language(language),
        )
        try:
            raw = await self._generate(messages)
            items = _unwrap_list(parse_structured(raw), "suggestions", raw)
            suggestions = _STRINGS_ADAPTER.validate_python(items)
        except (GatewayUnavailableError, MalformedResponseError, ValidationError) as exc:
            logger.warning("Suggestion generation failed: %s", exc)
            return []
        # Order-preserving de-duplication
        return list(dict.fromkeys(s.strip() for s in suggestions if s.strip()))[:max_suggestions]

    async def generate_symptom_options(
        self,
        body_part: str | None = None,
        symptom_type: str | None = None,
        language: str = "en",
        query: str | None = None,
    ) -> list[QuestionOption]:
        messages = self._prompts.symptom_options(
            body_part=body_part,
            symptom_type=symptom_type,
            query=query,
            language=resolve_language(language),
        )
        try:
            raw = await self._generate(messages)
            options = self._parse_options(raw)
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.warning("Symptom option generation failed: %s", exc)
            return []
        return dedupe_options(options, len(options))
