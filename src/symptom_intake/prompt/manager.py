"""PromptManager — Jinja2-based prompt renderer for gateway calls.

Loads templates from the ``template/`` directory.  Every call is rendered as
two messages: the shared ``system.jinja2`` persona and one task template
(initial question, follow-up question, emergency screen, answer options,
suggestions, symptom options, assessment).  Each task template includes
``_language.jinja2`` so the language switch lives in one place.
"""

from __future__ import annotations

import json
from pathlib import Path

import jinja2

from symptom_intake.constants import MAX_QUESTIONS
from symptom_intake.models.gateway import ChatMessage

# Retry note appended to the follow-up prompt after a duplicate question
DUPLICATE_NOTE = (
    "NOTE: The previous attempt generated a duplicate question. Please "
    "generate a completely different question that asks about a new aspect "
    "of the patient's condition."
)


class PromptManager:
    """Jinja2-based prompt renderer.

    Args:
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            # Prompts are plain text, never HTML
            autoescape=False,
            undefined=jinja2.StrictUndefined,
        )
        self._env.filters["tojson"] = lambda v: json.dumps(v, ensure_ascii=False)

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    def messages(self, template_name: str, *, language: str, **context) -> list[ChatMessage]:
        """System persona plus one rendered task prompt."""
        return [
            ChatMessage(role="system", content=self.render("system.jinja2", language=language)),
            ChatMessage(
                role="user",
                content=self.render(template_name, language=language, **context),
            ),
        ]

    # --- Task prompts ---

    def initial_question(self, language: str) -> list[ChatMessage]:
        return self.messages("initial_question.jinja2", language=language)

    def next_question(
        self,
        *,
        context: str,
        asked_topics: list[str],
        question_count: int,
        language: str,
        duplicate_attempts: int = 0,
        max_questions: int = MAX_QUESTIONS,
    ) -> list[ChatMessage]:
        """Follow-up question prompt.

        ``duplicate_attempts`` repeats :data:`DUPLICATE_NOTE` once per
        rejected attempt so every retry is stricter than the last.
        """
        return self.messages(
            "next_question.jinja2",
            language=language,
            context=context,
            asked_topics=asked_topics,
            question_number=question_count + 1,
            max_questions=max_questions,
            duplicate_notes=[DUPLICATE_NOTE] * duplicate_attempts,
        )

    def emergency_screen(self, *, context: str, language: str) -> list[ChatMessage]:
        return self.messages("emergency_screen.jinja2", language=language, context=context)

    def answer_options(
        self,
        *,
        question_text: str,
        question_type: str,
        context: str,
        max_options: int,
        language: str,
    ) -> list[ChatMessage]:
        return self.messages(
            "answer_options.jinja2",
            language=language,
            question_text=question_text,
            question_type=question_type,
            context=context,
            max_options=max_options,
        )

    def suggestions(
        self,
        *,
        question_text: str,
        current_input: str,
        context: str,
        max_suggestions: int,
        language: str,
    ) -> list[ChatMessage]:
        return self.messages(
            "suggestions.jinja2",
            language=language,
            question_text=question_text,
            current_input=current_input,
            context=context,
            max_suggestions=max_suggestions,
        )

    def symptom_options(
        self,
        *,
        body_part: str | None,
        symptom_type: str | None,
        query: str | None,
        language: str,
    ) -> list[ChatMessage]:
        return self.messages(
            "symptom_options.jinja2",
            language=language,
            body_part=body_part,
            symptom_type=symptom_type,
            query=query,
        )

    def assessment(
        self, *, context: str, response_count: int, language: str,
    ) -> list[ChatMessage]:
        return self.messages(
            "assessment.jinja2",
            language=language,
            context=context,
            response_count=response_count,
        )
