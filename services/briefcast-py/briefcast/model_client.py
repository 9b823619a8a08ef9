import time
from typing import Optional

from openai import AsyncOpenAI, APIError, APITimeoutError, OpenAIError

from .config import Config
from .errors import ConfigError, UpstreamError
from .logging import logger
from .schemas import LengthTarget


GENERIC_FAILURE = "Failed to summarize text"


def build_system_prompt(word_count: int, target: LengthTarget) -> str:
    """Instruction for the model; the length it states is the primary control."""
    return (
        "You are a professional article summarizer. Your task is to:\n"
        f"1. Summarize the given article to approximately {target.target_seconds} seconds "
        f"of reading time (about {target.target_words} words)\n"
        "2. Maintain the key points and main ideas\n"
        "3. Keep the summary clear and concise\n"
        "4. Preserve any important statistics or specific data points\n"
        "5. Structure the summary in a logical flow\n"
        "6. Start the summary with a brief fact to grab the listener's attention\n"
        "\n"
        f"The original article is {word_count} words long. Create a summary that's engaging "
        "and easy to understand while staying within the target length.\n"
        "\n"
        "Format the summary in a way that's easy to read and understand."
    )


class LLMClient:
    """Chat-completion summarizer bound to one Config.

    The AsyncOpenAI client is created on first use so a missing key surfaces
    as a ConfigError on the request that needs it, not at startup.
    """

    def __init__(self, config: Config, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.config.llm_api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.config.llm_api_key:
                raise ConfigError("LLM API key is not configured")
            kwargs = {}
            if self.config.llm_timeout:
                kwargs["timeout"] = self.config.llm_timeout
            self._client = AsyncOpenAI(
                api_key=self.config.llm_api_key,
                base_url=self.config.llm_api_base or None,
                max_retries=0,
                **kwargs,
            )
        return self._client

    async def summarize(self, content: str, *, word_count: int, target: LengthTarget) -> str:
        client = self._get_client()
        t0 = time.time()
        try:
            completion = await client.chat.completions.create(
                model=self.config.llm_model,
                messages=[
                    {"role": "system", "content": build_system_prompt(word_count, target)},
                    {"role": "user", "content": content},
                ],
                temperature=self.config.llm_temperature,
                max_tokens=self.config.llm_max_tokens,
            )
        except APITimeoutError as e:
            logger.error("llm.timeout", model=self.config.llm_model)
            raise UpstreamError(str(e) or GENERIC_FAILURE) from e
        except APIError as e:
            logger.error("llm.api_error", model=self.config.llm_model, status=getattr(e, "status_code", None), error=e.message)
            raise UpstreamError(e.message or GENERIC_FAILURE) from e
        except OpenAIError as e:
            logger.error("llm.failed", model=self.config.llm_model, error=str(e))
            raise UpstreamError(str(e) or GENERIC_FAILURE) from e

        summary = completion.choices[0].message.content if completion.choices else None
        if summary is None:
            raise UpstreamError(GENERIC_FAILURE)

        logger.info(
            "llm.completed",
            model=self.config.llm_model,
            latency_ms=int((time.time() - t0) * 1000),
            summary_chars=len(summary),
        )
        return summary

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
