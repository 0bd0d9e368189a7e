"""QuestionnaireService — in-memory session registry driving the flow.

State machine per session::

    Init ──► Collecting ──► [EmergencyCheck] ──► Collecting ... ──► Completing ──► done
                 │                                                     ▲
                 └────────────── (emergency detected) ─────────────────┘

After every appended answer, in order:

  1. emergency detected (structural or lexical) → terminal emergency step
  2. answer cap reached → assessment
  3. emergency screen warranted → the fixed emergency question
  4. otherwise the next generated question, or assessment when the
     gateway declines

Usage::

    service = QuestionnaireService(OpenAITextGateway())
    step = await service.start_session(language="en")
    step = await service.submit_response(
        step.session_id,
        QuestionResponse(question_id=step.question.id, answer="headache"),
    )
    # ... until step.type in ("assessment", "emergency")

Submissions on one session are serialised by a per-session
``asyncio.Lock``; a response that does not answer the current question is
rejected with ``SessionConflictError``.  Sessions are never persisted.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from symptom_intake import fixtures
from symptom_intake.answers import AnswerOptionGenerator
from symptom_intake.assessment import AssessmentEngine
from symptom_intake.constants import IMAGE_TOPICS, MAX_QUESTIONS, resolve_language
from symptom_intake.context import ContextBuilder
from symptom_intake.emergency import EmergencyDetector
from symptom_intake.errors import (
    InvalidResponseError,
    SessionBoundsExceededError,
    SessionConflictError,
    SessionNotFoundError,
)
from symptom_intake.flow import QuestionFlowController
from symptom_intake.interfaces import ImageAnalyzer, TextGenerationGateway
from symptom_intake.keywords import KeywordConfig, load_keyword_config
from symptom_intake.models.image import ImageAnalysisRequest
from symptom_intake.models.question import (
    CHOICE_QUESTION_TYPES,
    AIMultipleChoiceQuestion,
    ImageUploadQuestion,
    MultipleChoiceQuestion,
    Question,
)
from symptom_intake.models.response import QuestionnaireSession, QuestionResponse
from symptom_intake.models.step import AssessmentStep, QuestionStep, SessionInfo, Step
from symptom_intake.prompt import PromptManager
from symptom_intake.severity import SeverityClassifier

logger = logging.getLogger(__name__)

_MULTI_SELECT_TYPES = (MultipleChoiceQuestion, AIMultipleChoiceQuestion)


def normalize_answer(question: Question, response: QuestionResponse) -> QuestionResponse:
    """Fit the answer to the question kind before it is appended.

    Multi-select questions take a list; a bare string is wrapped into a
    one-item list so the structural emergency check still sees it.

    Raises:
        InvalidResponseError: a multi-select answer that is neither a list
            nor a string.
    """
    if not isinstance(question, _MULTI_SELECT_TYPES):
        return response
    answer = response.answer
    if isinstance(answer, list):
        return response
    if isinstance(answer, str):
        return response.model_copy(update={"answer": [answer]})
    raise InvalidResponseError(
        f"{question.id} takes a list of selections, got {type(answer).__name__}"
    )


class QuestionnaireService:
    """Owns live sessions and wires the SDK components together.

    Args:
        gateway: text-generation gateway shared by every component.
        image_analyzer: optional collaborator for image_upload answers.
        keywords: keyword configuration; defaults to the packaged YAML.
        prompts: prompt renderer; defaults to the packaged templates.
        max_questions: answer cap per session.
    """

    def __init__(
        self,
        gateway: TextGenerationGateway,
        *,
        image_analyzer: ImageAnalyzer | None = None,
        keywords: KeywordConfig | None = None,
        prompts: PromptManager | None = None,
        max_questions: int = MAX_QUESTIONS,
    ) -> None:
        keywords = keywords if keywords is not None else load_keyword_config()
        prompts = prompts or PromptManager()
        context_builder = ContextBuilder()
        detector = EmergencyDetector(keywords)

        self.max_questions = max_questions
        self.flow = QuestionFlowController(
            gateway,
            prompts=prompts,
            detector=detector,
            context_builder=context_builder,
            max_questions=max_questions,
        )
        self.answers = AnswerOptionGenerator(
            gateway, prompts=prompts, context_builder=context_builder,
        )
        self.engine = AssessmentEngine(
            gateway,
            prompts=prompts,
            detector=detector,
            classifier=SeverityClassifier(keywords),
            context_builder=context_builder,
        )
        self._image_analyzer = image_analyzer
        self._sessions: dict[str, QuestionnaireSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    # ==================================================================
    # Session lifecycle
    # ==================================================================

    async def start_session(
        self,
        language: str | None = None,
        topic: str | None = None,
        *,
        session_id: str | None = None,
    ) -> Step:
        """Create a session and return its first step.

        Image topics open with an upload question.  Home-page topics
        pre-fill the initial answer and continue with the first follow-up.
        """
        language = resolve_language(language)
        session_id = session_id or uuid.uuid4().hex
        if session_id in self._sessions:
            raise SessionConflictError(f"Session {session_id} already exists")

        session = QuestionnaireSession(id=session_id, language=language)
        self._sessions[session_id] = session
        self._locks[session_id] = asyncio.Lock()
        logger.info("Started session %s (language=%s, topic=%s)", session_id, language, topic)

        async with self._locks[session_id]:
            if topic in fixtures.HOME_TOPICS and topic not in IMAGE_TOPICS:
                session.append_response(
                    self.flow.initial_response_for_topic(topic, language),
                    max_questions=self.max_questions,
                )
                return await self._advance(session)

            question = await self.flow.issue_initial_question(language, topic)
            return await self._ask(session, question)

    def get_session(self, session_id: str) -> SessionInfo:
        session = self._get(session_id)
        return SessionInfo(
            session_id=session.id,
            language=session.language,
            question_count=session.question_count,
            current_question_id=session.current_question_id,
            completed=session.completed,
            started_at=session.started_at,
            completed_at=session.completed_at,
        )

    def get_state(self, session_id: str) -> QuestionnaireSession:
        """Full session state, including responses and the result."""
        return self._get(session_id)

    def discard_session(self, session_id: str) -> None:
        """Forget a session; abandoned sessions need no other cleanup."""
        self._get(session_id)
        del self._sessions[session_id]
        self._locks.pop(session_id, None)
        logger.info("Discarded session %s", session_id)

    def _get(self, session_id: str) -> QuestionnaireSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    # ==================================================================
    # Answers
    # ==================================================================

    async def submit_response(self, session_id: str, response: QuestionResponse) -> Step:
        """Append the answer to the current question and return the next step.

        Raises:
            SessionNotFoundError: unknown session id.
            SessionBoundsExceededError: the session is already completed.
            SessionConflictError: ``response`` does not answer the current
                question (stale or duplicate submission).
            InvalidResponseError: the answer does not fit the question kind.
            AssessmentUnavailableError: the final assessment failed; the
                answer is kept and :meth:`assess` may be retried.
        """
        session = self._get(session_id)
        async with self._locks[session_id]:
            if session.completed:
                raise SessionBoundsExceededError(f"Session {session_id} is already completed")
            expected = session.current_question_id
            if expected is None or response.question_id != expected:
                raise SessionConflictError(
                    f"Session {session_id} expects an answer to {expected!r}, "
                    f"got {response.question_id!r}"
                )
            response = normalize_answer(session.current_question, response)
            response = await self._attach_image_analysis(session, response)
            session.append_response(response, max_questions=self.max_questions)
            logger.debug(
                "Session %s: answer %d/%d to %s",
                session_id, session.question_count, self.max_questions, response.question_id,
            )
            return await self._advance(session)

    async def assess(self, session_id: str) -> AssessmentStep:
        """Finish the session now, or retry a failed assessment.

        A completed session returns its stored result.
        """
        session = self._get(session_id)
        async with self._locks[session_id]:
            if session.completed:
                return AssessmentStep(
                    type="emergency" if session.result.emergency_warning else "assessment",
                    session_id=session.id,
                    result=session.result,
                )
            if not session.responses:
                raise SessionConflictError(f"Session {session_id} has no responses to assess")
            return await self._complete(session)

    # ==================================================================
    # Transitions
    # ==================================================================

    async def _advance(self, session: QuestionnaireSession) -> Step:
        responses = session.responses
        language = session.language

        emergency = self.engine.emergency_result(responses, language)
        if emergency is not None:
            session.mark_completed(emergency)
            logger.warning("Session %s ended on emergency detection", session.id)
            return AssessmentStep(type="emergency", session_id=session.id, result=emergency)

        if session.question_count >= self.max_questions:
            return await self._complete(session)

        if await self.flow.should_issue_emergency_question(
            responses, language, already_issued=session.emergency_question_issued,
        ):
            logger.info("Session %s: issuing emergency screen", session.id)
            return await self._ask(session, self.flow.issue_emergency_question(language))

        question = await self.flow.issue_next_question(
            responses, session.question_count, language,
        )
        if question is None:
            return await self._complete(session)
        return await self._ask(session, question)

    async def _ask(self, session: QuestionnaireSession, question: Question) -> QuestionStep:
        question = await self._with_options(question, session.responses, session.language)
        session.issue(question)
        return QuestionStep(
            session_id=session.id,
            question_number=session.question_count + 1,
            question=question,
        )

    async def _complete(self, session: QuestionnaireSession) -> AssessmentStep:
        # AssessmentUnavailableError propagates; the session stays open
        result = await self.engine.analyze(session.responses, session.language)
        session.mark_completed(result)
        step_type = "emergency" if result.emergency_warning else "assessment"
        logger.info(
            "Session %s completed: %s severity=%s",
            session.id, step_type, result.severity.value,
        )
        return AssessmentStep(type=step_type, session_id=session.id, result=result)

    async def _with_options(
        self, question: Question, responses: list[QuestionResponse], language: str,
    ) -> Question:
        """Fill options for generated choice questions issued without any."""
        if not isinstance(question, CHOICE_QUESTION_TYPES):
            return question
        if not question.generate_answers or question.options:
            return question
        options = await self.answers.generate_answer_options(
            question.text,
            question.type,
            responses,
            max_options=question.max_options,
            language=language,
        )
        return question.model_copy(update={"options": options})

    async def _attach_image_analysis(
        self, session: QuestionnaireSession, response: QuestionResponse,
    ) -> QuestionResponse:
        image = response.image_data
        if image is None or image.analysis_result or self._image_analyzer is None:
            return response

        config = None
        if isinstance(session.current_question, ImageUploadQuestion):
            config = session.current_question.image_upload
        request = ImageAnalysisRequest(
            payload=image.payload,
            media_type=image.media_type,
            image_category=(config.image_type if config and config.image_type else "general"),
            context_prompt=(config.analysis_prompt if config and config.analysis_prompt else ""),
            language=session.language,
        )
        try:
            analysis = await self._image_analyzer.analyze(request)
        except Exception:
            # The collaborator is external; the answer is kept without analysis
            logger.exception("Image analysis failed for session %s", session.id)
            return response
        return response.model_copy(update={
            "image_data": image.model_copy(update={"analysis_result": analysis.analysis_text}),
        })
