import json
import os
import sys
import time
import base64
from datetime import datetime, date
from typing import Any, Dict, Iterable, Optional, TextIO

LEVELS = {"debug": 10, "info": 20, "warn": 30, "warning": 30, "error": 40}
_REDACT_KEYS = {
    "api_key",
    "llm_api_key",
    "tts_api_key",
    "xi-api-key",
    "authorization",
    "password",
    "secret",
    "token",
}

SERVICE_NAME = "briefcast"


def _safe_default(o: Any) -> Any:
    """Fallback serializer for non-JSON-serializable types."""
    if isinstance(o, (datetime, date)):
        return o.isoformat()
    if isinstance(o, (bytes, bytearray)):
        # audio payloads and the like: report size, never the bytes
        return {"__bytes__": len(o), "__b64_head__": base64.b64encode(bytes(o[:16])).decode("ascii")}
    if isinstance(o, set):
        return sorted(o, key=str)
    if isinstance(o, Exception):
        return {"type": o.__class__.__name__, "message": str(o)}
    return str(o)


def _scrub(obj: Any, redact_keys: Iterable[str]) -> Any:
    """Recursively scrub sensitive fields by key name (case-insensitive)."""
    if isinstance(obj, dict):
        out: Dict[str, Any] = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.lower() in redact_keys:
                out[k] = "[REDACTED]" if v else v
            else:
                out[k] = _scrub(v, redact_keys)
        return out
    if isinstance(obj, (list, tuple)):
        return [_scrub(v, redact_keys) for v in obj]
    return obj


class JsonLogger:
    """One JSON object per line: ts, event, level, pid, svc + fields."""

    def __init__(self, level: str = "info", stream: Optional[TextIO] = None) -> None:
        self.level = LEVELS.get(level.lower(), 20)
        self._pid = os.getpid()
        self._stream = stream

    def set_level(self, level: str) -> None:
        self.level = LEVELS.get(level.lower(), self.level)

    def _emit(self, level_name: str, event: str, **fields: Any) -> None:
        if LEVELS.get(level_name, 20) < self.level:
            return
        rec: Dict[str, Any] = {
            "ts": int(time.time() * 1000),
            "event": event,
            "level": "WARN" if level_name == "warning" else level_name.upper(),
            "pid": self._pid,
            "svc": SERVICE_NAME,
        }
        rec.update(fields)
        rec = _scrub(rec, _REDACT_KEYS)

        stream = self._stream or sys.stdout
        try:
            stream.write(json.dumps(rec, default=_safe_default, ensure_ascii=False) + "\n")
        except (TypeError, ValueError) as e:
            # never let a bad field take the request down with it
            fallback = {
                "ts": rec.get("ts"),
                "event": "logger.error",
                "level": "ERROR",
                "orig_event": event,
                "error": str(e),
            }
            stream.write(json.dumps(fallback) + "\n")
        stream.flush()

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, **fields)

    def warn(self, event: str, **fields: Any) -> None:
        self._emit("warn", event, **fields)

    # compatibility with std logging API
    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warn", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, **fields)


logger = JsonLogger(os.environ.get("LOG_LEVEL", "info"))
__all__ = ["logger", "JsonLogger", "_safe_default"]
