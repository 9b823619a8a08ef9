from __future__ import annotations

from typing import Generator

import httpx
import pytest

from briefcast.config import Config
from briefcast.model_client import LLMClient
from briefcast.speech_client import SpeechClient

from fakes import FakeCompletions, FakeOpenAI, RecordingTransport


# ==================== Fixtures ====================


@pytest.fixture
def config() -> Config:
    return Config(llm_api_key="sk-test", tts_api_key="xi-test", log_level="error")


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions()


@pytest.fixture
def llm(config: Config, completions: FakeCompletions) -> LLMClient:
    return LLMClient(config, client=FakeOpenAI(completions))


@pytest.fixture
def tts_transport() -> RecordingTransport:
    return RecordingTransport(
        lambda request: httpx.Response(200, content=bytes([0x49, 0x44, 0x33]), headers={"content-type": "audio/mpeg"})
    )


@pytest.fixture
def speech(config: Config, tts_transport: RecordingTransport) -> SpeechClient:
    return SpeechClient(config, client=httpx.AsyncClient(transport=tts_transport))


@pytest.fixture
def fetch_transport() -> RecordingTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/missing":
            return httpx.Response(404)
        return httpx.Response(
            200,
            text="<html><head><title>Launch</title></head><body><p>Rocket   goes</p><p>up.</p></body></html>",
            headers={"content-type": "text/html"},
        )

    return RecordingTransport(handler)


@pytest.fixture
def fetch_client(fetch_transport: RecordingTransport) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=fetch_transport)


@pytest.fixture
def app(config: Config, llm: LLMClient, speech: SpeechClient, fetch_client: httpx.AsyncClient):
    from briefcast.main import create_app

    application = create_app(config, llm=llm, speech=speech)
    application.state.fetch_client = fetch_client
    return application


@pytest.fixture
def test_client(app) -> Generator:
    from fastapi.testclient import TestClient

    client = TestClient(app)
    try:
        yield client
    finally:
        client.close()
