"""Shared fixtures for Cognition Wheel tests."""

import asyncio

import pytest

from cognition_wheel.backends.base import CallOptions
from cognition_wheel.config import Settings
from cognition_wheel.models.descriptor import BackendDescriptor
from cognition_wheel.orchestrator.registry import CODE_NAMES

ENV_VARS = [
    "OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_REASONING_EFFORT", "OPENAI_BASE_URL",
    "DEEPSEEK_API_KEY", "DEEPSEEK_MODEL", "DEEPSEEK_BASE_URL",
    "ZAI_API_KEY", "ZAI_BASE_URL", "ZAI_MODEL",
    "OPENROUTER_API_KEY", "OPENROUTER_MODELS", "OPENROUTER_BASE_URL",
    "CUSTOM_OPENAI_API_KEY", "CUSTOM_OPENAI_BASE_URL", "CUSTOM_OPENAI_MODEL",
    "BACKEND_TIMEOUT_SECONDS", "SYNTHESIZER_POLICY", "LOG_DIR",
]


class FakeBackend:
    """In-memory backend that records every prompt it receives."""

    def __init__(
        self, name, reply="", error=None, delay=0.0, synthesis=None, model=None
    ):
        self.name = name
        self.model = model or name.lower()
        self.reply = reply
        self.error = error
        self.delay = delay
        self.synthesis = synthesis
        self.prompts = []
        self.options = []

    async def generate(self, prompt, options):
        self.prompts.append(prompt)
        self.options.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.synthesis is not None and "**Your Synthesis:**" in prompt:
            return self.synthesis
        return self.reply


def make_descriptors(*backends, options=None):
    return tuple(
        BackendDescriptor(
            display_name=b.name,
            code_name=code,
            model=b.model,
            backend=b,
            call_options=options or CallOptions(),
        )
        for b, code in zip(backends, CODE_NAMES)
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real provider credentials out of the tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return Settings(_env_file=None, **overrides)

    return _make
