import time
from typing import Optional

import httpx

from ..config import Config
from ..errors import ConfigError, FetchError, ValidationError
from ..fetcher import fetch_text
from ..logging import logger
from ..model_client import LLMClient
from ..models import SummarizeRequest, SummarizeResponse, SummaryMetadata
from ..normalizers import prepare_content, target_length


async def summarize(
    req: SummarizeRequest,
    *,
    llm: LLMClient,
    config: Config,
    http_client: Optional[httpx.AsyncClient] = None,
) -> SummarizeResponse:
    """Validate, resolve content, prepare it and ask the LLM for a sized summary.

    One fetch (when a URL is given) and one LLM call; either failing aborts.
    """
    text = req.text or ""
    # the URL is used as given; a blank-but-present URL fails at fetch time
    url = req.url or ""
    if not text.strip() and not url:
        raise ValidationError("Either text or URL is required")
    if not llm.configured:
        raise ConfigError("LLM API key is not configured")

    content = text
    if url:
        try:
            content = await fetch_text(url, config=config, client=http_client)
        except FetchError as e:
            logger.error("summarize.fetch_failed", url=url, error=str(e))
            raise FetchError("Failed to fetch article from URL") from e

    prepared = prepare_content(content)
    target = target_length(prepared.word_count)

    t0 = time.time()
    summary = await llm.summarize(prepared.prepared_text, word_count=prepared.word_count, target=target)
    logger.info(
        "summarize.completed",
        source="url" if url else "text",
        word_count=prepared.word_count,
        target_words=target.target_words,
        target_seconds=target.target_seconds,
        latency_ms=int((time.time() - t0) * 1000),
    )

    return SummarizeResponse(
        summary=summary,
        metadata=SummaryMetadata(
            original_word_count=prepared.word_count,
            target_seconds=target.target_seconds,
            target_words=target.target_words,
        ),
    )
