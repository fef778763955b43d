"""Reusable LLM client for the extraction and summary services."""

import asyncio
import logging
from typing import Any

from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    InternalServerError,
    RateLimitError,
    Timeout,
)
from litellm.exceptions import ServiceUnavailableError as ProviderUnavailableError

from statement_ocr.config import Settings
from statement_ocr.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

# Transient failures worth another attempt; anything else (auth, bad request) fails immediately
RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    TimeoutError,
    ConnectionError,
    Timeout,
    APIConnectionError,
    RateLimitError,
    ProviderUnavailableError,
    InternalServerError,
)


def _reply_text(response: Any) -> str:
    # No choices or no content is an empty reply, left for the validator to reject
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()


class LLMClient:
    """Thin async wrapper around LiteLLM with bounded retry and error classification."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        service: str,
        timeout: float,
        temperature: float,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> str:
        """
        Send one chat completion request and return the reply text.

        Args:
            messages: Chat messages (text and image content parts)
            service: "extraction" or "summary", used for error attribution
            timeout: Timeout in seconds for each attempt
            temperature: Sampling temperature
            max_tokens: Optional output token cap
            response_format: Optional structured-output schema

        Returns:
            Reply text, trimmed of surrounding whitespace

        Raises:
            ServiceUnavailableError: On transport/provider failure after all attempts
        """
        max_attempts = self.settings.llm_max_attempts
        request: dict[str, Any] = {
            "model": self.settings.model_name,
            "messages": messages,
            "api_base": self.settings.api_base,
            "api_key": self.settings.api_key,
            "temperature": temperature,
            "timeout": timeout,
        }
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if response_format is not None:
            request["response_format"] = response_format

        for attempt in range(max_attempts):
            try:
                logger.debug(f"[{service}] attempt {attempt + 1}/{max_attempts} model={self.settings.model_name}")
                response = await acompletion(**request)

            except RETRYABLE_ERRORS as e:
                if attempt < max_attempts - 1:
                    wait_time = self.settings.llm_retry_backoff * (2**attempt)
                    logger.warning(
                        f"[{service}] transient failure (attempt {attempt + 1}/{max_attempts}): {e}. "
                        f"Retrying in {wait_time:.1f}s..."
                    )
                    await asyncio.sleep(wait_time)
                    continue
                logger.error(f"[{service}] failed after {max_attempts} attempts: {e}")
                raise ServiceUnavailableError(service, str(e)) from e

            except Exception as e:
                logger.error(f"[{service}] call failed: {e}")
                raise ServiceUnavailableError(service, str(e)) from e

            return _reply_text(response)

        # Should never reach here
        raise ServiceUnavailableError(service, "no attempts were made")
