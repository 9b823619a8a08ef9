import os
from dataclasses import dataclass
from typing import Optional


def _opt_float(name: str) -> Optional[float]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(frozen=True)
class Config:
    """Runtime configuration for the briefcast service (LLM + TTS + fetch).

    Built once by ``load_config()`` and handed to the app; request handlers
    never read the environment themselves.
    """

    # LLM (summaries)
    llm_api_key: Optional[str] = None
    llm_model: str = "gpt-4"
    llm_api_base: Optional[str] = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500
    llm_timeout: Optional[float] = None

    # TTS (speech)
    tts_api_key: Optional[str] = None
    tts_base_url: str = "https://api.elevenlabs.io"
    tts_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    tts_model_id: str = "eleven_monolingual_v1"
    tts_stability: float = 0.5
    tts_similarity_boost: float = 0.75
    tts_timeout: Optional[float] = None

    # URL fetch
    fetch_timeout_ms: Optional[int] = None
    user_agent: str = "briefcast/0.1"

    # Server / observability
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"


def load_config() -> Config:
    fetch_timeout = os.environ.get("FETCH_TIMEOUT_MS")
    return Config(
        llm_api_key=os.environ.get("OPENAI_API_KEY") or os.environ.get("LLM_API_KEY"),
        llm_model=os.environ.get("LLM_MODEL", "gpt-4"),
        llm_api_base=os.environ.get("LLM_API_BASE") or None,
        llm_temperature=float(os.environ.get("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(os.environ.get("LLM_MAX_TOKENS", "500")),
        llm_timeout=_opt_float("LLM_TIMEOUT"),
        tts_api_key=os.environ.get("ELEVENLABS_API_KEY"),
        tts_base_url=os.environ.get("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io").rstrip("/"),
        tts_voice_id=os.environ.get("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM"),
        tts_model_id=os.environ.get("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1"),
        tts_stability=float(os.environ.get("TTS_STABILITY", "0.5")),
        tts_similarity_boost=float(os.environ.get("TTS_SIMILARITY_BOOST", "0.75")),
        tts_timeout=_opt_float("TTS_TIMEOUT"),
        fetch_timeout_ms=int(fetch_timeout) if fetch_timeout else None,
        user_agent=os.environ.get("USER_AGENT", "briefcast/0.1"),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "info").lower(),
    )
