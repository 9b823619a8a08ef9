import time
from typing import Any, Optional

import httpx

from .config import Config
from .errors import ConfigError, UpstreamError
from .logging import logger


GENERIC_FAILURE = "Failed to generate audio"


def _error_message(resp: httpx.Response) -> str:
    """Pull a message out of the upstream error body, else describe the status."""
    fallback = f"API error: {resp.status_code} {resp.reason_phrase}"
    try:
        data: Any = resp.json()
    except ValueError:
        logger.warn("tts.error_body_unparseable", status=resp.status_code)
        return fallback

    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict) and detail.get("message"):
        return str(detail["message"])
    return fallback


class SpeechClient:
    """Text-to-speech over the ElevenLabs REST API, bound to one Config."""

    def __init__(self, config: Config, client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.config.tts_api_key)

    def _endpoint(self) -> str:
        return f"{self.config.tts_base_url}/v1/text-to-speech/{self.config.tts_voice_id}"

    def _payload(self, text: str) -> dict:
        return {
            "text": text,
            "model_id": self.config.tts_model_id,
            "voice_settings": {
                "stability": self.config.tts_stability,
                "similarity_boost": self.config.tts_similarity_boost,
            },
        }

    async def synthesize(self, text: str) -> bytes:
        """Return the full audio/mpeg payload for ``text``."""
        if not self.configured:
            raise ConfigError("API key is not configured")

        owns_client = self._client is None
        client = self._client
        if client is None:
            kwargs = {}
            if self.config.tts_timeout:
                kwargs["timeout"] = self.config.tts_timeout
            client = httpx.AsyncClient(**kwargs)

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.config.tts_api_key,
        }
        t0 = time.time()
        logger.info("tts.start", voice_id=self.config.tts_voice_id, chars=len(text))
        try:
            resp = await client.post(self._endpoint(), headers=headers, json=self._payload(text))
        except httpx.HTTPError as e:
            logger.error("tts.request_error", error=str(e))
            raise UpstreamError(str(e) or GENERIC_FAILURE) from e
        finally:
            if owns_client:
                await client.aclose()

        if not resp.is_success:
            message = _error_message(resp)
            logger.error("tts.api_error", status=resp.status_code, error=message)
            raise UpstreamError(message, status_code=resp.status_code)

        audio = resp.content
        logger.info(
            "tts.done",
            status=resp.status_code,
            bytes=len(audio),
            content_type=resp.headers.get("content-type", ""),
            latency_ms=int((time.time() - t0) * 1000),
        )
        return audio
