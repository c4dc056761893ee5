"""OpenAI-compatible chat completions backend (DeepSeek, OpenRouter, custom)."""

from __future__ import annotations

import logging

import httpx

from cognition_wheel.backends.base import BackendError, CallOptions

logger = logging.getLogger(__name__)


class ChatCompletionsBackend:
    """Backend for any endpoint speaking the /chat/completions protocol."""

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.name = name
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str, options: CallOptions) -> str:
        """Send the prompt as a single user message and return the reply."""
        logger.debug("%s: POST %s/chat/completions", self.name, self.base_url)
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )
            response.raise_for_status()

        data = response.json()
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise BackendError(f"{self.name}: malformed completion: {exc}") from exc
        if not text:
            raise BackendError(f"{self.name} returned an empty completion")
        return text
