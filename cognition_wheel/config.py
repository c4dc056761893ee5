"""Cognition Wheel configuration — loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-5"
    openai_reasoning_effort: Literal["minimal", "low", "medium", "high"] = "high"
    openai_base_url: str = "https://api.openai.com/v1"

    # DeepSeek
    deepseek_api_key: str = ""
    deepseek_model: str = "deepseek-chat"
    deepseek_base_url: str = "https://api.deepseek.com/v1"

    # z.ai — the Anthropic-compatible endpoint is the fastest of the three
    # (/api/anthropic/v1, /api/coding/paas/v4, /api/paas/v4)
    zai_api_key: str = ""
    zai_base_url: str = "https://api.z.ai/api/anthropic/v1"
    zai_model: str = "glm-4.6"

    # OpenRouter
    openrouter_api_key: str = ""
    openrouter_models: str = (
        "qwen/qwen3-coder,deepseek/deepseek-v3.2-exp,moonshotai/kimi-k2-0905"
    )
    openrouter_base_url: str = "https://openrouter.ai/api/v1"

    # Custom OpenAI-compatible provider
    custom_openai_api_key: str = ""
    custom_openai_base_url: str = ""
    custom_openai_model: str = ""

    # Orchestration
    backend_timeout_seconds: float = 300.0
    synthesizer_policy: Literal["priority", "random"] = "priority"

    # Logging
    log_dir: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    def openrouter_model_ids(self) -> list[str]:
        return [m.strip() for m in self.openrouter_models.split(",") if m.strip()]

    def active_providers(self) -> list[str]:
        """Names of the providers that have an API key configured."""
        providers = []
        if self.openai_api_key:
            providers.append("OpenAI")
        if self.deepseek_api_key:
            providers.append("DeepSeek")
        if self.zai_api_key:
            providers.append("z.ai")
        if self.openrouter_api_key:
            providers.append("OpenRouter")
        if self.custom_openai_api_key:
            providers.append("Custom-OpenAI-Compatible")
        return providers


settings = Settings()
