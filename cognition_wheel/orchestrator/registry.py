"""Backend registry — builds the active backend list from settings."""

from __future__ import annotations

import logging
from typing import Sequence

from cognition_wheel.backends.anthropic import AnthropicBackend
from cognition_wheel.backends.base import CallOptions, ModelBackend
from cognition_wheel.backends.chat import ChatCompletionsBackend
from cognition_wheel.backends.openai import OpenAIBackend
from cognition_wheel.config import Settings
from cognition_wheel.models.descriptor import BackendDescriptor

logger = logging.getLogger(__name__)

CODE_NAMES = ("Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta")


class ConfigurationError(RuntimeError):
    """The configuration cannot produce a usable set of backends."""


def _candidates(
    settings: Settings, search_enabled: bool
) -> list[tuple[str, str, ModelBackend, CallOptions]]:
    """(display name, model id, backend, options) in synthesizer priority order.

    Priority: OpenAI > DeepSeek > z.ai > OpenRouter > Custom.
    """
    timeout = settings.backend_timeout_seconds
    found: list[tuple[str, str, ModelBackend, CallOptions]] = []

    if settings.openai_api_key:
        backend = OpenAIBackend(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=timeout,
        )
        options = CallOptions(
            reasoning_effort=settings.openai_reasoning_effort,
            web_search=search_enabled,
        )
        found.append((backend.name, settings.openai_model, backend, options))

    if settings.deepseek_api_key:
        name = settings.deepseek_model.upper()
        backend = ChatCompletionsBackend(
            name=name,
            api_key=settings.deepseek_api_key,
            model=settings.deepseek_model,
            base_url=settings.deepseek_base_url,
            timeout=timeout,
        )
        found.append((name, settings.deepseek_model, backend, CallOptions()))

    if settings.zai_api_key:
        name = settings.zai_model.upper()
        zai_cls = (
            AnthropicBackend
            if "/anthropic" in settings.zai_base_url
            else ChatCompletionsBackend
        )
        backend = zai_cls(
            name=name,
            api_key=settings.zai_api_key,
            model=settings.zai_model,
            base_url=settings.zai_base_url,
            timeout=timeout,
        )
        found.append((name, settings.zai_model, backend, CallOptions()))

    if settings.openrouter_api_key:
        for model_id in settings.openrouter_model_ids():
            short = model_id.split("/", 1)[1] if "/" in model_id else model_id
            name = f"OpenRouter-{short}"
            backend = ChatCompletionsBackend(
                name=name,
                api_key=settings.openrouter_api_key,
                model=model_id,
                base_url=settings.openrouter_base_url,
                timeout=timeout,
            )
            found.append((name, model_id, backend, CallOptions()))

    if settings.custom_openai_api_key:
        if not settings.custom_openai_base_url or not settings.custom_openai_model:
            logger.warning(
                "CUSTOM_OPENAI_API_KEY provided but missing "
                "CUSTOM_OPENAI_BASE_URL or CUSTOM_OPENAI_MODEL; skipping"
            )
        else:
            name = f"Custom-{settings.custom_openai_model}"
            backend = ChatCompletionsBackend(
                name=name,
                api_key=settings.custom_openai_api_key,
                model=settings.custom_openai_model,
                base_url=settings.custom_openai_base_url,
                timeout=timeout,
            )
            found.append(
                (name, settings.custom_openai_model, backend, CallOptions())
            )

    return found


def _unique_names(names: list[str]) -> list[str]:
    """Suffix repeated display names ('X', 'X-2', ...) so each backend stays distinct."""
    seen: dict[str, int] = {}
    unique = []
    for name in names:
        count = seen.get(name.casefold(), 0) + 1
        seen[name.casefold()] = count
        if count > 1:
            logger.warning("Backend %s is configured more than once", name)
            name = f"{name}-{count}"
        unique.append(name)
    return unique


def build_registry(
    settings: Settings,
    search_enabled: bool = False,
    code_names: Sequence[str] = CODE_NAMES,
) -> tuple[BackendDescriptor, ...]:
    """Build a fresh, ordered tuple of descriptors for one run.

    Code names are handed out in registry order. Raises ConfigurationError
    if no backend is configured or there are more backends than code names.
    """
    found = _candidates(settings, search_enabled)
    if not found:
        raise ConfigurationError(
            "At least one API key is required (OPENAI_API_KEY, DEEPSEEK_API_KEY, "
            "OPENROUTER_API_KEY, ZAI_API_KEY, or CUSTOM_OPENAI_API_KEY)"
        )
    if len(found) > len(code_names):
        raise ConfigurationError(
            f"{len(found)} backends configured but only {len(code_names)} "
            "code names are available"
        )
    names = _unique_names([name for name, _, _, _ in found])

    descriptors = []
    for name, (_, model, backend, options), code in zip(names, found, code_names):
        # Backends are built per run, so renaming one touches nothing shared
        backend.name = name
        descriptors.append(
            BackendDescriptor(
                display_name=name,
                code_name=code,
                model=model,
                backend=backend,
                call_options=options,
            )
        )
    return tuple(descriptors)


def ensure_configured(settings: Settings) -> tuple[BackendDescriptor, ...]:
    """Startup check: fail fast when no run could ever be accepted."""
    descriptors = build_registry(settings)
    logger.info("Configured providers: %s", ", ".join(settings.active_providers()))
    logger.info(
        "Active backends: %s", ", ".join(d.display_name for d in descriptors)
    )
    return descriptors
