"""KeywordConfig loading tests."""

import pytest

from symptom_intake.keywords import DEFAULT_KEYWORDS_PATH, KeywordConfig, load_keyword_config


class TestPackagedKeywords:
    def test_packaged_file_exists(self):
        assert DEFAULT_KEYWORDS_PATH.exists()

    def test_languages(self, keywords):
        assert keywords.languages == ["en", "es"]

    def test_canonical_keywords_present(self, keywords):
        emergency = keywords.emergency_keywords()
        for word in ("chest pain", "can't breathe", "stroke", "heart attack", "suicide"):
            assert word in emergency
        assert "excruciating" in keywords.severe_keywords()
        assert "uncomfortable" in keywords.moderate_keywords()


class TestLoading:
    def test_flatten_lowercases_and_dedupes(self):
        config = KeywordConfig(emergency={"en": ["Stroke", "stroke"], "es": ["Infarto"]})
        assert config.emergency_keywords() == ("stroke", "infarto")
        assert config.severe_keywords() == ()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "kw.yaml"
        path.write_text("emergency:\n  en: [fainting]\n", encoding="utf-8")
        config = load_keyword_config(path)
        assert config.emergency_keywords() == ("fainting",)

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("emergency:\n  fr: [douleur thoracique]\n", encoding="utf-8")
        monkeypatch.setenv("INTAKE_KEYWORDS_PATH", str(path))
        assert load_keyword_config().emergency_keywords() == ("douleur thoracique",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_keyword_config(tmp_path / "missing.yaml")
