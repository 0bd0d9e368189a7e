"""SeverityClassifier and tier selection tests."""

import pytest

from helpers.builders import resp
from symptom_intake.models.assessment import Severity
from symptom_intake.models.gateway import CapabilityTier
from symptom_intake.severity import SeverityClassifier, select_tier, severity_from_scale


@pytest.fixture(scope="module")
def classifier():
    return SeverityClassifier()


class TestScale:
    @pytest.mark.parametrize("score, expected", [
        (9, Severity.SEVERE),
        (8, Severity.SEVERE),
        (7, Severity.MODERATE),
        (6, Severity.MODERATE),
        (2, Severity.MILD),
        (0, Severity.MILD),
    ])
    def test_scale_buckets(self, score, expected):
        assert severity_from_scale(score) == expected

    @pytest.mark.parametrize("score, expected", [
        (9, Severity.SEVERE),
        (7, Severity.MODERATE),
        (2, Severity.MILD),
    ])
    def test_scale_independent_of_other_responses(self, classifier, score, expected):
        """The numeric scale answer wins over any keyword elsewhere."""
        others = [
            resp("initial_symptom", "excruciating, the worst pain ever"),
            resp("notes", "moderate discomfort"),
        ]
        assert classifier.classify_severity([resp("severity_scale", score)] + others) == expected
        assert classifier.classify_severity(others + [resp("pain_level", score)]) == expected

    def test_first_scale_answer_used(self, classifier):
        responses = [resp("pain_scale", 2), resp("severity_scale", 9)]
        assert classifier.classify_severity(responses) == Severity.MILD

    def test_bool_is_not_a_scale_reading(self, classifier):
        responses = [resp("pain_present", True), resp("initial_symptom", "intense cramps")]
        assert classifier.classify_severity(responses) == Severity.SEVERE

    def test_string_number_is_not_a_scale_reading(self, classifier):
        assert classifier.classify_severity([resp("severity", "9")]) == Severity.MILD


class TestKeywords:
    def test_severe_keyword(self, classifier):
        assert classifier.classify_severity(
            [resp("initial_symptom", "Unbearable back ache")]
        ) == Severity.SEVERE

    def test_severe_checked_before_moderate(self, classifier):
        responses = [
            resp("initial_symptom", "moderate at first"),
            resp("change", "now it is intense"),
        ]
        assert classifier.classify_severity(responses) == Severity.SEVERE

    def test_moderate_keyword(self, classifier):
        assert classifier.classify_severity(
            [resp("initial_symptom", "an uncomfortable rash")]
        ) == Severity.MODERATE

    def test_default_mild(self, classifier):
        assert classifier.classify_severity([resp("initial_symptom", "runny nose")]) == Severity.MILD
        assert classifier.classify_severity([]) == Severity.MILD


class TestSelectTier:
    @pytest.mark.parametrize("severity, tier", [
        (Severity.EMERGENCY, CapabilityTier.PRIMARY),
        (Severity.SEVERE, CapabilityTier.PRIMARY),
        (Severity.MODERATE, CapabilityTier.QUICK),
        (Severity.MILD, CapabilityTier.QUICK),
    ])
    def test_tier(self, severity, tier):
        assert select_tier(severity).tier == tier

    def test_tier_options(self):
        primary = select_tier(Severity.SEVERE).options
        quick = select_tier(Severity.MILD).options
        assert (primary.temperature, primary.max_output_tokens) == (0.3, 1500)
        assert (quick.temperature, quick.max_output_tokens) == (0.2, 800)
