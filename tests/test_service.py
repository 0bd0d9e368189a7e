"""QuestionnaireService tests — the session state machine end to end.

Test scenarios:
  - Happy path: initial → follow-ups (with generated options) → assessment
  - Emergency short-circuit after an answer; session becomes terminal
  - Emergency screen interposed, answered "none", flow resumes
  - Answer cap reached → assessment without another question
  - Assessment failure keeps the session open; assess() retries
  - Stale / concurrent submissions rejected with SessionConflictError
  - Multi-select answers: bare string wrapped, other scalars rejected
  - Image answers analysed before being appended
  - Home-page topics pre-fill the initial answer
"""

import asyncio

import pytest

from helpers.builders import assessment_payload, question_payload
from helpers.gateway import StubGateway, StubImageAnalyzer
from symptom_intake.constants import EMERGENCY_QUESTION_ID, INITIAL_QUESTION_ID
from symptom_intake.errors import (
    AssessmentUnavailableError,
    InvalidResponseError,
    SessionBoundsExceededError,
    SessionConflictError,
    SessionNotFoundError,
)
from symptom_intake.models.response import ImageData, QuestionResponse
from symptom_intake.models.step import AssessmentStep, QuestionStep
from symptom_intake.service import QuestionnaireService

NO_SCREEN = {"needs_emergency_screen": False, "reason": "no red flags"}
INITIAL = question_payload(INITIAL_QUESTION_ID, "What brings you here today?")
OPTIONS = {"options": [
    {"id": "hours", "label": "Hours", "value": "hours"},
    {"id": "days", "label": "Days", "value": "days"},
]}


def answer(step: QuestionStep, value) -> QuestionResponse:
    return QuestionResponse(question_id=step.question.id, answer=value)


# =====================================================================
# Happy path
# =====================================================================


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_full_session(self):
        gateway = StubGateway(
            INITIAL,
            NO_SCREEN,
            question_payload("cough_duration", "How long have you been coughing?", "ai_single_choice"),
            OPTIONS,
            NO_SCREEN,
            {"done": True},
            assessment_payload(),
        )
        service = QuestionnaireService(gateway)

        step = await service.start_session("en")
        assert isinstance(step, QuestionStep)
        assert step.question_number == 1
        assert step.question.id == INITIAL_QUESTION_ID

        step = await service.submit_response(step.session_id, answer(step, "dry cough"))
        assert isinstance(step, QuestionStep)
        assert step.question_number == 2
        assert step.question.id == "cough_duration"
        assert [o.value for o in step.question.options] == ["hours", "days"]

        step = await service.submit_response(step.session_id, answer(step, "days"))
        assert isinstance(step, AssessmentStep)
        assert step.type == "assessment"
        assert step.result.possible_conditions
        assert gateway.call_count == 7

        info = service.get_session(step.session_id)
        assert info.completed
        assert info.question_count == 2
        assert info.current_question_id is None

    @pytest.mark.asyncio
    async def test_gateway_down_still_completes_questioning(self):
        """Fallback initial question, then straight to (failing) assessment."""
        service = QuestionnaireService(StubGateway())
        step = await service.start_session("en")
        assert step.question.text == "What is your main health concern or symptom today?"
        with pytest.raises(AssessmentUnavailableError):
            await service.submit_response(step.session_id, answer(step, "sore throat"))


# =====================================================================
# Emergency
# =====================================================================


class TestEmergency:
    @pytest.mark.asyncio
    async def test_keyword_short_circuit(self):
        gateway = StubGateway(INITIAL)
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        session_id = step.session_id

        step = await service.submit_response(
            session_id, answer(step, "crushing chest pain radiating to my arm"),
        )
        assert isinstance(step, AssessmentStep)
        assert step.type == "emergency"
        assert step.result.emergency_warning
        assert step.result.possible_conditions == []
        assert gateway.call_count == 1

        with pytest.raises(SessionBoundsExceededError):
            await service.submit_response(
                session_id, QuestionResponse(question_id="anything", answer="x"),
            )

    @pytest.mark.asyncio
    async def test_emergency_screen_interposed(self):
        gateway = StubGateway(
            INITIAL,
            {"needs_emergency_screen": True, "reason": "fever"},
            question_payload("fever_days", "How many days of fever?", "number_input"),
        )
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        step = await service.submit_response(step.session_id, answer(step, "high temperature"))
        assert step.question.id == EMERGENCY_QUESTION_ID

        step = await service.submit_response(step.session_id, answer(step, ["none"]))
        assert step.question.id == "fever_days"
        # No second screen call once the emergency question was issued
        assert gateway.call_count == 3

    @pytest.mark.asyncio
    async def test_bare_string_selection_ends_session(self):
        gateway = StubGateway(INITIAL, {"needs_emergency_screen": True})
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        step = await service.submit_response(step.session_id, answer(step, "headache"))
        assert step.question.id == EMERGENCY_QUESTION_ID

        step = await service.submit_response(step.session_id, answer(step, "chest_pain"))
        assert step.type == "emergency"
        assert gateway.call_count == 2
        stored = service.get_state(step.session_id).responses[-1]
        assert stored.answer == ["chest_pain"]

    @pytest.mark.asyncio
    async def test_scalar_selection_rejected(self):
        gateway = StubGateway(INITIAL, {"needs_emergency_screen": True})
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        step = await service.submit_response(step.session_id, answer(step, "headache"))
        with pytest.raises(InvalidResponseError):
            await service.submit_response(step.session_id, answer(step, True))
        info = service.get_session(step.session_id)
        assert info.question_count == 1
        assert info.current_question_id == EMERGENCY_QUESTION_ID

    @pytest.mark.asyncio
    async def test_emergency_selection_ends_session(self):
        gateway = StubGateway(INITIAL, {"needs_emergency_screen": True})
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        step = await service.submit_response(step.session_id, answer(step, "odd feeling"))
        step = await service.submit_response(step.session_id, answer(step, ["seizures"]))
        assert step.type == "emergency"


# =====================================================================
# Cap and assessment retries
# =====================================================================


class TestCapAndRetry:
    @pytest.mark.asyncio
    async def test_cap_goes_straight_to_assessment(self):
        gateway = StubGateway(
            INITIAL,
            NO_SCREEN,
            question_payload("onset", "When did it start?"),
            assessment_payload(),
        )
        service = QuestionnaireService(gateway, max_questions=2)
        step = await service.start_session()
        step = await service.submit_response(step.session_id, answer(step, "rash"))
        step = await service.submit_response(step.session_id, answer(step, "yesterday"))
        assert isinstance(step, AssessmentStep)
        assert gateway.call_count == 4

    @pytest.mark.asyncio
    async def test_failed_assessment_can_be_retried(self):
        gateway = StubGateway(INITIAL)
        service = QuestionnaireService(gateway, max_questions=1)
        step = await service.start_session()
        session_id = step.session_id

        with pytest.raises(AssessmentUnavailableError):
            await service.submit_response(session_id, answer(step, "itchy eyes"))
        info = service.get_session(session_id)
        assert not info.completed
        assert info.question_count == 1

        gateway.queue(assessment_payload())
        step = await service.assess(session_id)
        assert step.type == "assessment"
        # Completed sessions return the stored result
        again = await service.assess(session_id)
        assert again.result == step.result

    @pytest.mark.asyncio
    async def test_assess_without_responses(self):
        service = QuestionnaireService(StubGateway(INITIAL))
        step = await service.start_session()
        with pytest.raises(SessionConflictError):
            await service.assess(step.session_id)


# =====================================================================
# Conflicts and registry
# =====================================================================


class TestConflicts:
    @pytest.mark.asyncio
    async def test_stale_question_id(self):
        service = QuestionnaireService(StubGateway(INITIAL))
        step = await service.start_session()
        with pytest.raises(SessionConflictError):
            await service.submit_response(
                step.session_id, QuestionResponse(question_id="old_question", answer="x"),
            )
        assert service.get_session(step.session_id).question_count == 0

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_submissions(self):
        gateway = StubGateway(
            INITIAL, NO_SCREEN, question_payload("onset", "When did it start?"),
        )
        service = QuestionnaireService(gateway)
        step = await service.start_session()
        results = await asyncio.gather(
            service.submit_response(step.session_id, answer(step, "back ache")),
            service.submit_response(step.session_id, answer(step, "back ache")),
            return_exceptions=True,
        )
        assert sum(isinstance(r, QuestionStep) for r in results) == 1
        assert sum(isinstance(r, SessionConflictError) for r in results) == 1
        assert service.get_session(step.session_id).question_count == 1

    @pytest.mark.asyncio
    async def test_duplicate_session_id(self):
        service = QuestionnaireService(StubGateway(INITIAL, INITIAL))
        await service.start_session(session_id="abc")
        with pytest.raises(SessionConflictError):
            await service.start_session(session_id="abc")

    @pytest.mark.asyncio
    async def test_discard(self):
        service = QuestionnaireService(StubGateway(INITIAL))
        step = await service.start_session()
        service.discard_session(step.session_id)
        with pytest.raises(SessionNotFoundError):
            service.get_session(step.session_id)
        with pytest.raises(SessionNotFoundError):
            service.discard_session(step.session_id)


# =====================================================================
# Topics and images
# =====================================================================


class TestTopics:
    @pytest.mark.asyncio
    async def test_home_topic_prefills_initial_answer(self):
        gateway = StubGateway(NO_SCREEN, question_payload("mood_duration", "How long has your mood been low?"))
        service = QuestionnaireService(gateway)
        step = await service.start_session("es", "mental")
        assert step.question_number == 2
        state = service.get_state(step.session_id)
        assert state.responses[0].question_id == INITIAL_QUESTION_ID
        assert state.responses[0].answer.startswith("Tengo preocupaciones sobre mi salud mental")
        assert "IMPORTANTE" in gateway.calls[0].prompt
        assert "IMPORTANTE" in gateway.calls[1].prompt

    @pytest.mark.asyncio
    async def test_image_answer_analysed(self):
        analyzer = StubImageAnalyzer("Hairline fracture of the radius")
        gateway = StubGateway(NO_SCREEN, {"done": True}, assessment_payload())
        service = QuestionnaireService(gateway, image_analyzer=analyzer)

        step = await service.start_session("en", "xray")
        assert step.question.id == "image_upload_xray"
        assert gateway.call_count == 0

        upload = QuestionResponse(
            question_id=step.question.id,
            answer="wrist.png",
            image_data=ImageData(
                payload="aGVsbG8=", filename="wrist.png", size=5, media_type="image/png",
            ),
        )
        step = await service.submit_response(step.session_id, upload)
        assert step.type == "assessment"
        assert analyzer.requests[0].image_category == "xray"
        stored = service.get_state(step.session_id).responses[0]
        assert stored.image_data.analysis_result == "Hairline fracture of the radius"
        assert "(image analysis: Hairline fracture of the radius)" in gateway.calls[0].prompt

    @pytest.mark.asyncio
    async def test_image_analysis_failure_keeps_answer(self):
        analyzer = StubImageAnalyzer(fail=True)
        gateway = StubGateway(NO_SCREEN, {"done": True}, assessment_payload())
        service = QuestionnaireService(gateway, image_analyzer=analyzer)
        step = await service.start_session("en", "mri")
        upload = QuestionResponse(
            question_id=step.question.id,
            answer="scan.dcm",
            image_data=ImageData(
                payload="aGVsbG8=", filename="scan.dcm", size=5, media_type="application/dicom",
            ),
        )
        step = await service.submit_response(step.session_id, upload)
        stored = service.get_state(step.session_id).responses[0]
        assert stored.image_data.analysis_result is None
