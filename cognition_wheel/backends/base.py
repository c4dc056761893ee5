"""Base protocol for all model backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class BackendError(RuntimeError):
    """A backend answered but produced nothing usable."""


@dataclass(frozen=True)
class CallOptions:
    """Per-call parameters a backend may honour or ignore."""

    reasoning_effort: str | None = None
    web_search: bool = False


@runtime_checkable
class ModelBackend(Protocol):
    """Interface that all LLM backends must implement."""

    name: str
    model: str

    async def generate(self, prompt: str, options: CallOptions) -> str:
        """Send a single prompt and return the generated text."""
        ...
