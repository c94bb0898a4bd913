import asyncio
import pytest
from unittest.mock import MagicMock
import sys
import os

# Add project root to sys.path so we can import comic_studio and main
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from comic_studio.core.models import Character
from comic_studio.core.session import ScriptSession


class FakeImageClient:
    """Stands in for GenAIClient. Results are keyed by panel id; exceptions are raised."""

    def __init__(self, results=None):
        self.results = results or {}
        self.requests = []

    async def generate_image(self, request, name="panel"):
        self.requests.append((name, request))
        await asyncio.sleep(0)
        result = self.results.get(name, f"img://{name}")
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def mock_genai_client(mocker):
    """Fixture to mock the Google GenAI Client."""
    mock_client = mocker.patch('google.genai.Client')
    return mock_client

@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables."""
    monkeypatch.setenv("GEMINI_API_KEY", "fake_key")
    monkeypatch.setenv("IMAGE_MODEL_NAME", "imagen-test-model")

@pytest.fixture
def roster():
    return [
        Character(id="c1", name="Anne", description="a red-haired pirate captain"),
        Character(id="c2", name="Bo", description="a one-eyed parrot"),
        Character(id="c3", name="Cal", description="a nervous cabin boy"),
    ]

@pytest.fixture
def session(roster):
    session = ScriptSession(roster)
    session.draft("pirates", "adventure", "a stormy sea", ["c1"])
    return session

@pytest.fixture
def fake_client():
    return FakeImageClient()
