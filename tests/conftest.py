import pytest

from helpers.gateway import StubGateway, StubImageAnalyzer
from symptom_intake.keywords import load_keyword_config
from symptom_intake.prompt import PromptManager


@pytest.fixture
def gateway():
    """Fresh StubGateway with nothing queued (behaves as unreachable)."""
    return StubGateway()


@pytest.fixture
def analyzer():
    return StubImageAnalyzer()


@pytest.fixture(scope="session")
def keywords():
    """Packaged keyword lists, loaded once."""
    return load_keyword_config()


@pytest.fixture(scope="session")
def pm():
    return PromptManager()
