import sys
from pathlib import Path

import pytest

# Add root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from memory.record_store import JsonRecordStore


PROVIDER_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "GROQ_API_KEY")


@pytest.fixture(autouse=True)
def no_provider_credentials(monkeypatch):
    """Tests never reach a real LLM provider."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class StubProvider:
    """Stands in for GeminiProvider / GroqProvider."""

    def __init__(self, name, reply=None, error=None):
        self.name = name
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, prompt):
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def store(tmp_path):
    return JsonRecordStore(str(tmp_path / "records.json"))
