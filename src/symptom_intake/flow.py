"""QuestionFlowController — decides what to ask next.

Stateless across sessions: every method takes the response list it needs
and returns a ``Question`` (or ``None``/``bool``).  Failures of the gateway
never stall a conversation:

  - initial question: gateway failure → fixed open-text fallback
  - next question: gateway failure or repeated duplicates → ``None``
    (the caller proceeds to assessment)
  - emergency screen: gateway failure → ``False``

The emergency question itself is a fixed fixture and is never generated.
"""

from __future__ import annotations

import logging
import re

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from symptom_intake import fixtures
from symptom_intake.constants import (
    EMERGENCY_QUESTION_ID,
    IMAGE_TOPICS,
    INITIAL_QUESTION_ID,
    MAX_QUESTION_ATTEMPTS,
    MAX_QUESTIONS,
    resolve_language,
)
from symptom_intake.context import ContextBuilder
from symptom_intake.emergency import EmergencyDetector
from symptom_intake.errors import GatewayUnavailableError, MalformedResponseError
from symptom_intake.interfaces import TextGenerationGateway
from symptom_intake.models.gateway import TIER_PROFILES, CapabilityTier, ChatMessage
from symptom_intake.models.question import BaseQuestion, Question
from symptom_intake.models.response import QuestionResponse
from symptom_intake.prompt import PromptManager
from symptom_intake.repair import parse_structured

logger = logging.getLogger(__name__)

_QUESTION_ADAPTER = TypeAdapter(Question)

# Ids the gateway may never reuse for a generated follow-up
_RESERVED_IDS = frozenset({INITIAL_QUESTION_ID, EMERGENCY_QUESTION_ID})


class _EmergencyScreen(BaseModel):
    needs_emergency_screen: bool = Field(
        default=False,
        validation_alias=AliasChoices("needs_emergency_screen", "needsEmergencyScreen"),
    )
    reason: str = ""


_WORD = re.compile(r"[^\W_]+")


def _keywords(text: str) -> set[str]:
    """Words longer than 3 characters; "_" separates words."""
    return {w for w in _WORD.findall(text.lower()) if len(w) > 3}


def is_unique_question(question: BaseQuestion, responses: list[QuestionResponse]) -> bool:
    """Reject a follow-up that reuses an id or mostly restates an earlier one.

    Earlier questions are only known by their ids, so the wording check
    compares the new question's words (longer than 3 chars) against the
    ``_``-separated words of each earlier id.  More than 50% overlap with
    any of them counts as a duplicate.
    """
    used_ids = {r.question_id for r in responses}
    if question.id in used_ids or question.id in _RESERVED_IDS:
        return False

    new_words = _keywords(question.text)
    for qid in used_ids:
        old_words = _keywords(qid)
        overlap = new_words & old_words
        if len(overlap) > min(len(new_words), len(old_words)) * 0.5:
            return False
    return True


class QuestionFlowController:
    """Issues initial, follow-up and emergency questions.

    Args:
        gateway: text-generation gateway.
        prompts: prompt renderer; defaults to the packaged templates.
        detector: emergency detector used for the lexical pre-check of
            :meth:`should_issue_emergency_question`.
        context_builder: renders responses into prompt context.
        max_questions: answer cap per session.
    """

    def __init__(
        self,
        gateway: TextGenerationGateway,
        *,
        prompts: PromptManager | None = None,
        detector: EmergencyDetector | None = None,
        context_builder: ContextBuilder | None = None,
        max_questions: int = MAX_QUESTIONS,
    ) -> None:
        self._gateway = gateway
        self._prompts = prompts or PromptManager()
        self._detector = detector or EmergencyDetector()
        self._context = context_builder or ContextBuilder()
        self.max_questions = max_questions

    async def _generate(self, messages: list[ChatMessage]) -> str:
        profile = TIER_PROFILES[CapabilityTier.LIGHT]
        return await self._gateway.generate(messages, profile.tier.value, profile.options)

    # ------------------------------------------------------------------
    # Initial question
    # ------------------------------------------------------------------

    async def issue_initial_question(
        self, language: str = "en", topic: str | None = None,
    ) -> Question:
        """Opening question; image topics open with a fixed upload question."""
        language = resolve_language(language)
        if topic in IMAGE_TOPICS:
            logger.info("Opening with image upload for topic=%s", topic)
            return fixtures.image_upload_question(IMAGE_TOPICS[topic], language)

        try:
            raw = await self._generate(self._prompts.initial_question(language))
            question = parse_structured(raw, Question)
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.warning("Initial question generation failed, using fallback: %s", exc)
            return fixtures.fallback_initial_question(language)

        if question.id != INITIAL_QUESTION_ID:
            question = question.model_copy(update={"id": INITIAL_QUESTION_ID})
        return question

    # ------------------------------------------------------------------
    # Follow-up questions
    # ------------------------------------------------------------------

    async def issue_next_question(
        self,
        responses: list[QuestionResponse],
        question_count: int,
        language: str = "en",
    ) -> Question | None:
        """Next follow-up, or ``None`` to stop and assess.

        Returns ``None`` exactly when ``question_count`` has reached the
        cap, when the gateway declines with ``{"done": true}``, on gateway
        or parse failure, and after three duplicate attempts.
        """
        if question_count >= self.max_questions:
            return None

        language = resolve_language(language)
        context = self._context.build(responses)
        topics = self._context.asked_topics(responses)

        try:
            for attempt in range(MAX_QUESTION_ATTEMPTS):
                messages = self._prompts.next_question(
                    context=context,
                    asked_topics=topics,
                    question_count=question_count,
                    language=language,
                    duplicate_attempts=attempt,
                    max_questions=self.max_questions,
                )
                raw = await self._generate(messages)
                value = parse_structured(raw)
                if isinstance(value, dict) and value.get("done") is True:
                    logger.info("Gateway ended questioning at count=%d", question_count)
                    return None
                question = self._to_question(value, raw)
                if is_unique_question(question, responses):
                    return question
                logger.warning(
                    "Duplicate follow-up question (attempt %d/%d): %s",
                    attempt + 1, MAX_QUESTION_ATTEMPTS, question.id,
                )
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.warning("Next question generation failed: %s", exc)
            return None

        logger.error("No unique follow-up question after %d attempts", MAX_QUESTION_ATTEMPTS)
        return None

    @staticmethod
    def _to_question(value, raw: str) -> Question:
        try:
            return _QUESTION_ADAPTER.validate_python(value)
        except ValidationError as exc:
            raise MalformedResponseError(f"not a valid question: {exc}", raw=raw) from exc

    # ------------------------------------------------------------------
    # Emergency screening
    # ------------------------------------------------------------------

    async def should_issue_emergency_question(
        self,
        responses: list[QuestionResponse],
        language: str = "en",
        *,
        already_issued: bool = False,
    ) -> bool:
        """Whether to interpose the fixed emergency question now.

        ``False`` for an empty list or once the emergency question has been
        issued or answered.  A lexical keyword hit answers ``True`` without
        a gateway call; otherwise the gateway decides and any failure means
        ``False``.
        """
        if not responses or already_issued:
            return False
        if any(r.question_id == EMERGENCY_QUESTION_ID for r in responses):
            return False
        if self._detector.emergency_lexical_hit(responses):
            return True

        try:
            raw = await self._generate(self._prompts.emergency_screen(
                context=self._context.build(responses),
                language=resolve_language(language),
            ))
            screen = parse_structured(raw, _EmergencyScreen)
        except (GatewayUnavailableError, MalformedResponseError) as exc:
            logger.warning("Emergency screen check failed, not screening: %s", exc)
            return False

        if screen.needs_emergency_screen:
            logger.info("Gateway requested emergency screen: %s", screen.reason)
        return screen.needs_emergency_screen

    def issue_emergency_question(self, language: str = "en") -> Question:
        return fixtures.emergency_question(resolve_language(language))

    # ------------------------------------------------------------------
    # Fixed questions
    # ------------------------------------------------------------------

    def basic_info_questions(self, language: str = "en") -> list[Question]:
        return fixtures.basic_info_questions(resolve_language(language))

    def initial_response_for_topic(self, topic: str, language: str = "en") -> QuestionResponse:
        """Pre-filled answer to the initial question for a home-page topic."""
        return fixtures.initial_response_for_topic(topic, resolve_language(language))
