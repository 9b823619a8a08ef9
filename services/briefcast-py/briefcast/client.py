"""Client-side workflow: summarize an article, then have it read aloud.

UI state lives in an immutable ``UIState`` record; every change goes through
``transition()``. ``Workflow`` drives a running briefcast service over HTTP
and feeds the outcomes back through the same reducer, so any front-end can
render ``workflow.state`` without owning the request logic.
"""

import base64
import binascii
import os
import tempfile
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union

import httpx

from .logging import logger


IDLE = "idle"
SUMMARIZING = "summarizing"
GENERATING_AUDIO = "generating_audio"


@dataclass(frozen=True)
class UIState:
    text: str = ""
    url: str = ""
    status: str = IDLE
    error: Optional[str] = None
    summary: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    audio_path: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status != IDLE


# ----------------------------------- events -----------------------------------------


@dataclass(frozen=True)
class InputChanged:
    text: str = ""
    url: str = ""


@dataclass(frozen=True)
class SummarizeStarted:
    pass


@dataclass(frozen=True)
class SummarizeSucceeded:
    summary: str
    metadata: Dict[str, Any]


@dataclass(frozen=True)
class AudioStarted:
    pass


@dataclass(frozen=True)
class AudioSucceeded:
    audio_path: str


@dataclass(frozen=True)
class RequestFailed:
    error: str


Event = Union[InputChanged, SummarizeStarted, SummarizeSucceeded, AudioStarted, AudioSucceeded, RequestFailed]


def effective_text(state: UIState) -> str:
    """What gets read aloud: the latest summary, else the raw input."""
    return state.summary or state.text


def can_summarize(state: UIState) -> bool:
    return not state.loading and bool(state.text.strip() or state.url.strip())


def can_generate_audio(state: UIState) -> bool:
    return not state.loading and bool(effective_text(state).strip())


def transition(state: UIState, event: Event) -> UIState:
    """Pure reducer. Start events are dropped unless their trigger is enabled."""
    if isinstance(event, InputChanged):
        return replace(state, text=event.text, url=event.url)
    if isinstance(event, SummarizeStarted):
        if not can_summarize(state):
            return state
        return replace(state, status=SUMMARIZING, error=None)
    if isinstance(event, AudioStarted):
        if not can_generate_audio(state):
            return state
        return replace(state, status=GENERATING_AUDIO, error=None)
    if isinstance(event, SummarizeSucceeded):
        return replace(state, status=IDLE, summary=event.summary, metadata=event.metadata)
    if isinstance(event, AudioSucceeded):
        return replace(state, status=IDLE, audio_path=event.audio_path)
    if isinstance(event, RequestFailed):
        return replace(state, status=IDLE, error=event.error)
    raise TypeError(f"unknown event: {event!r}")


# ----------------------------------- driver -----------------------------------------


class WorkflowError(Exception):
    """A request finished without a usable result; message is UI-ready."""
    pass


def _error_from_response(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"Error: {resp.status_code}"


def _write_audio(b64_audio: str) -> str:
    try:
        audio = base64.b64decode(b64_audio, validate=True)
    except (binascii.Error, ValueError) as e:
        raise WorkflowError("Failed to process audio data") from e
    fd, path = tempfile.mkstemp(prefix="briefcast-", suffix=".mp3")
    with os.fdopen(fd, "wb") as fh:
        fh.write(audio)
    return path


def _discard_audio(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)


class Workflow:
    """Runs the summarize / generate-audio actions against a briefcast server."""

    def __init__(self, client: httpx.AsyncClient, state: Optional[UIState] = None) -> None:
        self.client = client
        self.state = state or UIState()

    def dispatch(self, event: Event) -> UIState:
        self.state = transition(self.state, event)
        return self.state

    def set_input(self, text: str = "", url: str = "") -> UIState:
        return self.dispatch(InputChanged(text=text, url=url))

    async def summarize(self) -> UIState:
        before = self.state
        if self.dispatch(SummarizeStarted()) is before:
            return self.state
        try:
            resp = await self.client.post("/summarize", json={"text": self.state.text, "url": self.state.url})
            if not resp.is_success:
                raise WorkflowError(_error_from_response(resp))
            data = resp.json()
            if not isinstance(data, dict) or not isinstance(data.get("summary"), str):
                raise WorkflowError("No summary received from the server")
            metadata = data.get("metadata")
            self.dispatch(SummarizeSucceeded(summary=data["summary"], metadata=metadata if isinstance(metadata, dict) else {}))
        except WorkflowError as e:
            logger.warn("client.summarize_failed", error=str(e))
            self.dispatch(RequestFailed(str(e)))
        except (httpx.HTTPError, ValueError) as e:
            logger.warn("client.summarize_failed", error=str(e))
            self.dispatch(RequestFailed(str(e) or "Failed to summarize text"))
        finally:
            if self.state.loading:
                self.dispatch(RequestFailed("Failed to summarize text"))
        return self.state

    async def generate_audio(self) -> UIState:
        before = self.state
        if self.dispatch(AudioStarted()) is before:
            return self.state
        try:
            resp = await self.client.post("/speech", json={"text": effective_text(self.state)})
            if not resp.is_success:
                raise WorkflowError(_error_from_response(resp))
            data = resp.json()
            audio = data.get("audio") if isinstance(data, dict) else None
            if not audio or not isinstance(audio, str):
                raise WorkflowError("No audio data received from the server")
            path = _write_audio(audio)
            previous = self.state.audio_path
            self.dispatch(AudioSucceeded(audio_path=path))
            _discard_audio(previous)
        except WorkflowError as e:
            logger.warn("client.audio_failed", error=str(e))
            self.dispatch(RequestFailed(str(e)))
        except (httpx.HTTPError, ValueError) as e:
            logger.warn("client.audio_failed", error=str(e))
            self.dispatch(RequestFailed(str(e) or "Failed to generate audio"))
        finally:
            if self.state.loading:
                self.dispatch(RequestFailed("Failed to generate audio"))
        return self.state

    def close(self) -> None:
        """Drop the current audio file."""
        _discard_audio(self.state.audio_path)
        self.state = replace(self.state, audio_path=None)
