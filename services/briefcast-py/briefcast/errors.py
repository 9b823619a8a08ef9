from typing import Dict, Optional, Type


class BriefcastError(Exception):
    """Base for errors that are rendered to callers as ``{"error": message}``."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BriefcastError):
    """Required input is missing or empty."""


class FetchError(BriefcastError):
    """Article content could not be retrieved from the given URL."""


class ConfigError(BriefcastError):
    """A credential or setting needed for the request is not configured."""


class UpstreamError(BriefcastError):
    """A third-party service (LLM or TTS) failed.

    ``status_code`` carries the upstream HTTP status when the service supplied
    one that should be passed through to the caller.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


STATUS_CODES: Dict[Type[BriefcastError], int] = {
    ValidationError: 400,
    FetchError: 400,
    ConfigError: 500,
    UpstreamError: 500,
}


def status_for(exc: BriefcastError) -> int:
    if isinstance(exc, UpstreamError) and exc.status_code and 400 <= exc.status_code <= 599:
        return exc.status_code
    for klass in type(exc).__mro__:
        if klass in STATUS_CODES:
            return STATUS_CODES[klass]
    return 500
