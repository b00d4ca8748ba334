from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_orchestrator
from assistant.assistant import ReplyOrchestrator
from assistant.core.schemas import Glossary
from config.settings import Settings
from tests.fakes import FakeStore, RecordingLLM


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key", gemini_model="gemini-test")


@pytest.fixture
def pcm_glossary() -> Glossary:
    return {"pcm": {"dey tire": "I am tired"}}


@pytest.fixture
def llm() -> RecordingLLM:
    return RecordingLLM()


@pytest.fixture
def make_client():
    def _make(settings: Settings, store: FakeStore, llm: RecordingLLM) -> TestClient:
        app.dependency_overrides[get_orchestrator] = lambda: ReplyOrchestrator(
            settings=settings, store=store, llm_factory=lambda _settings: llm
        )
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
