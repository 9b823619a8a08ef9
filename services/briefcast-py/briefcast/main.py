import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Config, load_config
from .errors import BriefcastError, status_for
from .logging import logger
from .model_client import LLMClient
from .routes.health import router as health_router
from .routes.speech import router as speech_router
from .routes.summarize import router as summarize_router
from .speech_client import SpeechClient


class SetupError(Exception):
    """Raised when service setup fails."""
    pass


def validate_config(config: Config) -> None:
    """Reject out-of-range settings; missing credentials only warn.

    A missing key fails the requests that need it (ConfigError), so the
    other endpoint stays usable.
    """
    logger.info("setup.validating_config")

    if not 0 <= config.llm_temperature <= 2:
        raise SetupError(f"LLM_TEMPERATURE must be 0-2, got {config.llm_temperature}")
    if config.llm_max_tokens < 1:
        raise SetupError(f"LLM_MAX_TOKENS must be > 0, got {config.llm_max_tokens}")
    for name, value in (("TTS_STABILITY", config.tts_stability), ("TTS_SIMILARITY_BOOST", config.tts_similarity_boost)):
        if not 0 <= value <= 1:
            raise SetupError(f"{name} must be 0-1, got {value}")
    if config.llm_api_base and not config.llm_api_base.startswith(("http://", "https://")):
        raise SetupError(f"LLM_API_BASE must be a valid URL, got: {config.llm_api_base}")
    if not config.tts_base_url.startswith(("http://", "https://")):
        raise SetupError(f"ELEVENLABS_BASE_URL must be a valid URL, got: {config.tts_base_url}")

    if not config.llm_api_key:
        logger.warn("setup.llm_key_missing", hint="set OPENAI_API_KEY; /summarize will fail")
    if not config.tts_api_key:
        logger.warn("setup.tts_key_missing", hint="set ELEVENLABS_API_KEY; /speech will fail")

    logger.info(
        "setup.completed",
        config={
            "llm_model": config.llm_model,
            "llm_max_tokens": config.llm_max_tokens,
            "tts_voice_id": config.tts_voice_id,
            "tts_model_id": config.tts_model_id,
            "log_level": config.log_level,
        },
    )


async def _briefcast_error_handler(request: Request, exc: BriefcastError) -> JSONResponse:
    status = status_for(exc)
    logger.warn("request.failed", path=request.url.path, status=status, error_type=type(exc).__name__, error=exc.message)
    return JSONResponse({"error": exc.message}, status_code=status)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    logger.warn("request.invalid_body", path=request.url.path, error=message)
    return JSONResponse({"error": message}, status_code=400)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request.unhandled_error", path=request.url.path, error=exc)
    return JSONResponse({"error": str(exc) or "Internal server error"}, status_code=500)


def create_app(
    config: Optional[Config] = None,
    *,
    llm: Optional[LLMClient] = None,
    speech: Optional[SpeechClient] = None,
) -> FastAPI:
    config = config or load_config()
    logger.set_level(config.log_level)
    validate_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.llm.aclose()

    app = FastAPI(title="Briefcast", lifespan=lifespan)
    app.state.config = config
    app.state.llm = llm or LLMClient(config)
    app.state.speech = speech or SpeechClient(config)

    app.add_exception_handler(BriefcastError, _briefcast_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(health_router)
    app.include_router(summarize_router)
    app.include_router(speech_router)
    return app


def main() -> int:
    try:
        config = load_config()
        app = create_app(config)
    except (SetupError, ValueError) as e:
        logger.error("setup.failed", error=str(e))
        return 1

    logger.info("server.starting", host=config.host, port=config.port)
    uvicorn_level = "warning" if config.log_level == "warn" else config.log_level
    uvicorn.run(app, host=config.host, port=config.port, log_level=uvicorn_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
