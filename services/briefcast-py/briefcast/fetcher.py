import re
import time
from typing import Optional

import httpx

from .config import Config
from .errors import FetchError
from .logging import logger


_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")

_BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def strip_markup(html: str) -> str:
    """Best-effort text extraction: drop every <...> span, squash whitespace.

    No DOM and no script/style awareness, so inline JS and CSS survive as text.
    """
    text = _TAG_RE.sub(" ", html or "")
    return _WS_RE.sub(" ", text).strip()


def _http_client(cfg: Config) -> httpx.AsyncClient:
    headers = dict(_BASE_HEADERS)
    headers["User-Agent"] = cfg.user_agent
    kwargs = {}
    if cfg.fetch_timeout_ms:
        kwargs["timeout"] = max(1.0, cfg.fetch_timeout_ms / 1000.0)
    return httpx.AsyncClient(follow_redirects=True, headers=headers, **kwargs)


async def fetch_text(url: str, *, config: Config, client: Optional[httpx.AsyncClient] = None) -> str:
    """GET ``url`` and return its markup-stripped text.

    Raises FetchError on transport failures and non-2xx responses.
    """
    owns_client = client is None
    if client is None:
        client = _http_client(config)

    t0 = time.time()
    logger.info("fetch.start", url=url)
    try:
        resp = await client.get(url)
        if not resp.is_success:
            logger.warn("fetch.bad_status", url=url, status=resp.status_code)
            raise FetchError(f"Failed to fetch URL: {resp.reason_phrase}")

        text = strip_markup(resp.text)
        logger.info(
            "fetch.done",
            url=url,
            final_url=str(resp.url),
            status=resp.status_code,
            bytes=len(resp.content),
            chars=len(text),
            latency_ms=int((time.time() - t0) * 1000),
        )
        return text

    except httpx.TimeoutException as e:
        logger.warn("fetch.timeout", url=url)
        raise FetchError("Failed to fetch URL: timeout") from e
    except (httpx.RequestError, httpx.InvalidURL) as e:
        # DNS/refused/TLS/bad scheme etc
        logger.warn("fetch.request_error", url=url, error=str(e))
        raise FetchError(f"Failed to fetch URL: {e}") from e
    finally:
        if owns_client:
            await client.aclose()
