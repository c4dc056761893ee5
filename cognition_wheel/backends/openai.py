"""OpenAI backend — Responses API via httpx."""

from __future__ import annotations

import logging

import httpx

from cognition_wheel.backends.base import BackendError, CallOptions

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-5"


class OpenAIBackend:
    """Backend using OpenAI's Responses API (reasoning effort, web search)."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.name = model.upper()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str, options: CallOptions) -> str:
        """Run one prompt through the Responses API and return the output text."""
        payload: dict = {"model": self.model, "input": prompt}
        if options.reasoning_effort:
            payload["reasoning"] = {"effort": options.reasoning_effort}
        if options.web_search:
            payload["tools"] = [
                {"type": "web_search_preview", "search_context_size": "high"}
            ]

        logger.debug("%s: POST %s/responses", self.name, self.base_url)
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                f"{self.base_url}/responses",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            response.raise_for_status()

        return self._extract_text(response.json())

    def _extract_text(self, data: dict) -> str:
        """Join the output_text parts of every message item."""
        if isinstance(data.get("output_text"), str) and data["output_text"]:
            return data["output_text"]

        parts: list[str] = []
        for item in data.get("output", []):
            if item.get("type") != "message":
                continue
            for block in item.get("content", []):
                if block.get("type") == "output_text":
                    parts.append(block.get("text", ""))
        text = "".join(parts)
        if not text:
            raise BackendError(f"{self.name} returned no output text")
        return text
