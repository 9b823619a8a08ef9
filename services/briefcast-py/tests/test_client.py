"""Tests for the client state machine and its HTTP driver."""
import os

import httpx
import pytest

from briefcast.client import (
    GENERATING_AUDIO,
    IDLE,
    SUMMARIZING,
    AudioStarted,
    AudioSucceeded,
    InputChanged,
    RequestFailed,
    SummarizeStarted,
    SummarizeSucceeded,
    UIState,
    Workflow,
    can_generate_audio,
    can_summarize,
    effective_text,
    transition,
)
from briefcast.config import Config
from briefcast.main import create_app
from briefcast.speech_client import SpeechClient


# ==================== Reducer ====================


class TestTransition:
    def test_summarize_requires_input(self):
        state = UIState()
        assert not can_summarize(state)
        assert transition(state, SummarizeStarted()) is state

    def test_summarize_start_clears_error_and_sets_loading(self):
        state = UIState(text="An article", error="old failure")
        started = transition(state, SummarizeStarted())
        assert started.status == SUMMARIZING
        assert started.loading
        assert started.error is None

    def test_url_alone_enables_summarize(self):
        state = transition(UIState(), InputChanged(url="https://example.com/a"))
        assert can_summarize(state)

    def test_triggers_disabled_while_loading(self):
        state = transition(UIState(text="An article"), SummarizeStarted())
        assert not can_summarize(state)
        assert not can_generate_audio(state)
        assert transition(state, AudioStarted()) is state
        assert transition(state, SummarizeStarted()) is state

    def test_summarize_success_stores_result(self):
        state = transition(UIState(text="An article"), SummarizeStarted())
        metadata = {"originalWordCount": 2, "targetLength": 30, "targetWords": 50}
        done = transition(state, SummarizeSucceeded(summary="Short.", metadata=metadata))
        assert done.status == IDLE
        assert done.summary == "Short."
        assert done.metadata == metadata

    def test_failure_keeps_previous_summary(self):
        state = UIState(text="An article", summary="Earlier summary.")
        state = transition(state, SummarizeStarted())
        failed = transition(state, RequestFailed("boom"))
        assert failed.status == IDLE
        assert failed.error == "boom"
        assert failed.summary == "Earlier summary."

    def test_effective_text_prefers_summary(self):
        assert effective_text(UIState(text="raw")) == "raw"
        assert effective_text(UIState(text="raw", summary="brief")) == "brief"

    def test_audio_from_summary_without_raw_text(self):
        state = UIState(summary="brief")
        started = transition(state, AudioStarted())
        assert started.status == GENERATING_AUDIO
        done = transition(started, AudioSucceeded(audio_path="/tmp/a.mp3"))
        assert done.audio_path == "/tmp/a.mp3"
        assert not done.loading


# ==================== Workflow over HTTP ====================


def _workflow(app) -> Workflow:
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://briefcast.test")
    return Workflow(client)


@pytest.mark.asyncio
async def test_summarize_then_generate_audio(app, completions, tts_transport):
    workflow = _workflow(app)
    workflow.set_input(text="Rockets are launched from pads near the sea.")

    state = await workflow.summarize()
    assert state.error is None
    assert state.summary == "Did you know? A short summary."
    assert state.metadata["targetWords"] == 50

    state = await workflow.generate_audio()
    try:
        assert state.error is None
        assert not state.loading
        with open(state.audio_path, "rb") as fh:
            assert fh.read() == bytes([0x49, 0x44, 0x33])
        # the summary, not the raw input, is read aloud
        assert b"Did you know?" in tts_transport.requests[0].content
    finally:
        workflow.close()
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_new_audio_discards_previous_file(app):
    workflow = _workflow(app)
    workflow.set_input(text="Read me aloud.")

    first = (await workflow.generate_audio()).audio_path
    second = (await workflow.generate_audio()).audio_path
    try:
        assert first != second
        assert not os.path.exists(first)
        assert os.path.exists(second)
    finally:
        workflow.close()
    assert not os.path.exists(second)
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_summarize_error_is_surfaced(app):
    workflow = _workflow(app)
    workflow.set_input(url="https://news.example.com/missing")

    state = await workflow.summarize()

    assert state.error == "Failed to fetch article from URL"
    assert not state.loading
    assert state.summary is None
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_audio_error_is_surfaced(llm, tts_transport):
    config = Config(llm_api_key="sk-test", tts_api_key=None)
    speech = SpeechClient(config, client=httpx.AsyncClient(transport=tts_transport))
    workflow = _workflow(create_app(config, llm=llm, speech=speech))
    workflow.set_input(text="hello")

    state = await workflow.generate_audio()

    assert state.error == "API key is not configured"
    assert state.audio_path is None
    assert not state.loading
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_missing_audio_in_response_is_error():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    workflow = Workflow(httpx.AsyncClient(transport=transport, base_url="http://briefcast.test"))
    workflow.set_input(text="hello")

    state = await workflow.generate_audio()

    assert state.error == "No audio data received from the server"
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_error_without_body_uses_status():
    transport = httpx.MockTransport(lambda r: httpx.Response(502, text="bad gateway"))
    workflow = Workflow(httpx.AsyncClient(transport=transport, base_url="http://briefcast.test"))
    workflow.set_input(text="An article")

    state = await workflow.summarize()

    assert state.error == "Error: 502"
    assert not state.loading
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_non_object_summary_body_is_error():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json=["x"]))
    workflow = Workflow(httpx.AsyncClient(transport=transport, base_url="http://briefcast.test"))
    workflow.set_input(text="An article")

    state = await workflow.summarize()

    assert state.error == "No summary received from the server"
    assert state.summary is None
    assert not state.loading
    await workflow.client.aclose()


@pytest.mark.asyncio
async def test_non_string_audio_is_error():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"audio": 123}))
    workflow = Workflow(httpx.AsyncClient(transport=transport, base_url="http://briefcast.test"))
    workflow.set_input(text="hello")

    state = await workflow.generate_audio()

    assert state.error == "No audio data received from the server"
    assert state.audio_path is None
    assert not state.loading
    await workflow.client.aclose()
