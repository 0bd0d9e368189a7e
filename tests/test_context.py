"""ContextBuilder tests — deterministic rendering of the response list."""

from helpers.builders import resp
from symptom_intake.context import ContextBuilder, flatten_answer
from symptom_intake.models.response import ImageData, QuestionResponse


class TestFlattenAnswer:
    def test_list_joined(self):
        assert flatten_answer(["nausea", "fever"]) == "nausea, fever"

    def test_bool_rendered_yes_no(self):
        assert flatten_answer(True) == "yes"
        assert flatten_answer(False) == "no"

    def test_number(self):
        assert flatten_answer(7) == "7"


class TestBuild:
    def test_labels_and_order(self):
        responses = [
            resp("age", "34"),
            resp("initial_symptom", "headache"),
            resp("gender", "female"),
            resp("pain_location", ["left temple", "neck"]),
        ]
        assert ContextBuilder().build(responses) == (
            "Patient age: 34\n"
            "Primary complaint: headache\n"
            "Gender: female\n"
            "pain_location: left temple, neck"
        )

    def test_empty(self):
        assert ContextBuilder().build([]) == ""

    def test_deterministic(self):
        """Same responses render identically regardless of timestamps."""
        a = [resp("initial_symptom", "cough")]
        b = [resp("initial_symptom", "cough")]
        assert ContextBuilder().build(a) == ContextBuilder().build(b)

    def test_image_analysis_appended(self):
        response = QuestionResponse(
            question_id="image_upload_xray",
            answer="uploaded",
            image_data=ImageData(
                payload="aGVsbG8=", filename="chest.png", size=5,
                media_type="image/png", analysis_result="No fracture seen",
            ),
        )
        assert ContextBuilder().build([response]) == (
            "image_upload_xray: uploaded (image analysis: No fracture seen)"
        )

    def test_custom_labels(self):
        builder = ContextBuilder(labels={"initial_symptom": "Chief complaint"})
        assert builder.build([resp("initial_symptom", "x")]) == "Chief complaint: x"


class TestAskedTopics:
    def test_topics_mapped_and_deduplicated(self):
        topics = ContextBuilder.asked_topics([
            resp("initial_symptom", "x"),
            resp("pain_severity", 5),
            resp("severity_scale", 6),
            resp("symptom_duration", "days"),
            resp("fever_present", True),
        ])
        assert topics == [
            "Primary symptoms and health concerns",
            "Pain severity and characteristics",
            "Questions about fever present",
        ]
