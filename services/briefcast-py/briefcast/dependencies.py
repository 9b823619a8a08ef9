"""FastAPI dependency wiring; everything hangs off ``app.state``."""

from typing import Optional

import httpx
from fastapi import Request

from .config import Config
from .model_client import LLMClient
from .speech_client import SpeechClient


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm


def get_speech_client(request: Request) -> SpeechClient:
    return request.app.state.speech


def get_fetch_client(request: Request) -> Optional[httpx.AsyncClient]:
    """Shared client for article fetches; None means one client per fetch."""
    return getattr(request.app.state, "fetch_client", None)
