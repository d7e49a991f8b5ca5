from typing import Any

import openai
import structlog

from bagtag.core.config import settings

logger = structlog.get_logger(__name__)

JSON_OBJECT = {"type": "json_object"}


class OpenAIClientWrapper:
    """Async OpenAI client that only asks for JSON objects.

    ``client`` takes anything shaped like ``openai.AsyncClient``; without one
    the key comes from OPENAI_API_KEY.
    """

    def __init__(self, api_key: str | None = None, client: Any | None = None):
        if client is None:
            key = api_key or settings.openai_api_key
            if not key:
                raise ValueError("OPENAI_API_KEY is not set")
            client = openai.AsyncClient(api_key=key, timeout=settings.openai_timeout_seconds)
        self.client = client

    async def json_completion(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.0,
        operation: str = "chat",
    ) -> str | None:
        """Return the raw text of the first choice, or None when there is none."""
        log = logger.bind(operation=operation, model=model)
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                response_format=JSON_OBJECT,
            )
        except Exception as exc:
            log.error("openai_api_error", error=str(exc))
            raise

        usage = getattr(response, "usage", None)
        if usage is None:
            log.warning("openai_usage_missing")
        else:
            log.info(
                "openai_usage",
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )

        if not response.choices:
            return None
        return response.choices[0].message.content
