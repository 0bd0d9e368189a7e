"""KeywordConfig — emergency and severity keyword lists, loaded from YAML.

The lists are injected into :class:`EmergencyDetector` and
:class:`SeverityClassifier` at construction time so deployments can swap
them per locale without code changes.

Usage::

    config = load_keyword_config()            # packaged data/keywords.yaml
    config = load_keyword_config("kw.yaml")   # deployment override
    detector = EmergencyDetector(config)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS_PATH = Path(__file__).parent / "data" / "keywords.yaml"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _flatten(by_language: dict[str, list[str]]) -> tuple[str, ...]:
    """Lower-cased, de-duplicated union of every language's list (YAML order kept)."""
    seen: dict[str, None] = {}
    for words in by_language.values():
        for word in words:
            seen.setdefault(word.lower(), None)
    return tuple(seen)


class KeywordConfig(BaseModel):
    """Keyword lists keyed by language code."""

    emergency: dict[str, list[str]]
    severe: dict[str, list[str]] = {}
    moderate: dict[str, list[str]] = {}

    @property
    def languages(self) -> list[str]:
        return sorted(set(self.emergency) | set(self.severe) | set(self.moderate))

    def emergency_keywords(self) -> tuple[str, ...]:
        return _flatten(self.emergency)

    def severe_keywords(self) -> tuple[str, ...]:
        return _flatten(self.severe)

    def moderate_keywords(self) -> tuple[str, ...]:
        return _flatten(self.moderate)


def load_keyword_config(path: Path | str | None = None) -> KeywordConfig:
    """Parse a keyword YAML file into a :class:`KeywordConfig`.

    Resolution order: explicit ``path``, ``INTAKE_KEYWORDS_PATH`` env var,
    then the packaged ``data/keywords.yaml``.
    """
    if path is None:
        path = os.getenv("INTAKE_KEYWORDS_PATH") or DEFAULT_KEYWORDS_PATH
    raw = load_yaml(path)
    config = KeywordConfig(**raw)
    logger.info(
        "KeywordConfig loaded from %s: %d emergency, %d severe, %d moderate keywords",
        path,
        len(config.emergency_keywords()),
        len(config.severe_keywords()),
        len(config.moderate_keywords()),
    )
    return config
