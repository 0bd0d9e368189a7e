"""ContextBuilder — renders the response list into prompt context.

The rendered block is the only conversational memory passed to later
prompts, so it must be complete and keep response order.  Output depends
solely on the response list (no timestamps, no wall-clock time).
"""

from __future__ import annotations

from symptom_intake.constants import CONTEXT_LABELS
from symptom_intake.models.response import QuestionResponse

# Ordered (id substrings, topic) pairs for asked_topics(); first match wins.
_TOPIC_PATTERNS: list[tuple[tuple[str, ...], str]] = [
    (("initial", "symptom"), "Primary symptoms and health concerns"),
    (("pain", "severity"), "Pain severity and characteristics"),
    (("duration", "time"), "Symptom duration and timeline"),
    (("location", "where"), "Symptom location and affected areas"),
    (("trigger", "cause"), "Triggers and contributing factors"),
    (("emergency",), "Emergency symptoms screening"),
    (("age", "gender"), "Basic demographic information"),
    (("medical", "history"), "Medical history and conditions"),
    (("medication", "treatment"), "Current medications and treatments"),
    (("activity", "impact"), "Impact on daily activities"),
    (("associated", "additional"), "Associated symptoms"),
]


def flatten_answer(answer) -> str:
    """Render one answer value as text.  Lists are joined with ", "."""
    if isinstance(answer, list):
        return ", ".join(str(a) for a in answer)
    if isinstance(answer, bool):
        return "yes" if answer else "no"
    return str(answer)


class ContextBuilder:
    """Pure renderer of a response list.

    Args:
        labels: optional override for the question-id → label table.
    """

    def __init__(self, labels: dict[str, str] | None = None) -> None:
        self._labels = dict(CONTEXT_LABELS if labels is None else labels)

    def label_for(self, question_id: str) -> str:
        return self._labels.get(question_id, question_id)

    def render_response(self, response: QuestionResponse) -> str:
        line = f"{self.label_for(response.question_id)}: {flatten_answer(response.answer)}"
        image = response.image_data
        if image is not None and image.analysis_result:
            line += f" (image analysis: {image.analysis_result})"
        return line

    def build(self, responses: list[QuestionResponse]) -> str:
        """One ``"<label>: <answer>"`` line per response, in order."""
        return "\n".join(self.render_response(r) for r in responses)

    @staticmethod
    def asked_topics(responses: list[QuestionResponse]) -> list[str]:
        """Coarse topics already covered, derived from question ids.

        Used in follow-up prompts so the gateway does not re-ask a topic
        under a new id.
        """
        topics: dict[str, None] = {}
        for response in responses:
            qid = response.question_id.lower()
            for markers, topic in _TOPIC_PATTERNS:
                if any(m in qid for m in markers):
                    topics.setdefault(topic, None)
                    break
            else:
                topics.setdefault(f"Questions about {qid.replace('_', ' ')}", None)
        return list(topics)
