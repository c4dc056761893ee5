"""Anthropic-compatible messages backend (z.ai's default endpoint)."""

from __future__ import annotations

import logging

import httpx

from cognition_wheel.backends.base import BackendError, CallOptions

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 16000


class AnthropicBackend:
    """Backend for endpoints speaking the Anthropic /messages protocol."""

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
        logger.debug("%s: POST %s/messages", self.name, self.base_url)
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                f"{self.base_url}/messages",
                headers={
                    "x-api-key": self.api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                    "content-type": "application/json",
                },
                json={
                    "model": self.model,
                    "max_tokens": MAX_TOKENS,
                    "messages": [{"role": "user", "content": prompt}],
                },
            )
            response.raise_for_status()

        data = response.json()
        # Thinking-enabled models put thinking blocks ahead of the text blocks
        text = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if block.get("type") == "text"
        )
        if not text:
            raise BackendError(f"{self.name} returned no text content")
        return text
