import logging
from typing import Dict, List, Optional

import httpx

from apologist.core.config import settings
from apologist.core.exceptions import CompletionFailure

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}


def parse_completion(data) -> str:
    """Pull the answer text out of an OpenAI-style chat completion body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionFailure("Malformed completion response from model provider") from e
    if not isinstance(content, str) or not content.strip():
        raise CompletionFailure("Model provider returned an empty answer")
    return content.strip()


class OpenRouterCompletionProvider:
    """Chat completions through the OpenRouter API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENROUTER_API_KEY
        self.model = model or settings.LLM_MODEL
        self.url = url or settings.OPENROUTER_URL
        self.timeout = timeout or settings.COMPLETION_TIMEOUT
        self.client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "http://localhost:3000",
            "X-Title": "Apologist RAG App",
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self.url, json=payload, headers=self._headers(), timeout=self.timeout
        )

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Get a completion for the message list."""
        if not self.api_key:
            raise CompletionFailure("OpenRouter API key not configured")

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            if self.client is not None:
                response = await self._post(self.client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise CompletionFailure(
                f"Model provider returned HTTP {status}",
                transient=status in TRANSIENT_STATUS_CODES,
            ) from e
        except httpx.TransportError as e:
            raise CompletionFailure(
                f"Could not reach model provider: {e}", transient=True
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionFailure("Model provider returned invalid JSON") from e
        return parse_completion(data)
