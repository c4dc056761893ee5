"""Dispatcher — fans one prompt out to every active backend."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Sequence, TypeVar

from cognition_wheel.models.descriptor import BackendDescriptor
from cognition_wheel.models.result import BackendOutcome, OutcomeStatus
from cognition_wheel.orchestrator.anonymizer import Anonymizer

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DeadlineExceeded(Exception):
    """A backend call was still running when its deadline expired."""


async def call_with_deadline(coro: Awaitable[T], timeout: float | None) -> T:
    """Await ``coro`` under a deadline.

    Only expiry of the deadline raises DeadlineExceeded. Anything the call
    itself raises, including its own TimeoutError, propagates unchanged.
    """

    async def guarded() -> tuple[T | None, Exception | None]:
        try:
            return await coro, None
        except Exception as exc:
            return None, exc

    try:
        result, error = await asyncio.wait_for(guarded(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise DeadlineExceeded(f"timed out after {timeout:g}s") from exc
    if error is not None:
        raise error
    return result  # type: ignore[return-value]


class Dispatcher:
    """Calls every backend concurrently and waits for all of them.

    A failing or timed-out backend never aborts the batch: its slot is
    filled with a placeholder naming the backend (by code-name token) and
    the cause.
    """

    def __init__(self, timeout_seconds: float | None = 300.0) -> None:
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self,
        descriptors: Sequence[BackendDescriptor],
        prompt: str,
        anonymizer: Anonymizer,
    ) -> list[BackendOutcome]:
        """Return one outcome per descriptor, in descriptor order."""
        if not descriptors:
            raise ValueError("At least one backend is required")

        logger.info("Dispatching calls to %d models in parallel.", len(descriptors))
        tasks = [self._run_backend(d, prompt, anonymizer) for d in descriptors]
        return list(await asyncio.gather(*tasks))

    async def _run_backend(
        self, descriptor: BackendDescriptor, prompt: str, anonymizer: Anonymizer
    ) -> BackendOutcome:
        name = descriptor.display_name
        logger.info("Calling %s...", name)
        start = time.perf_counter()
        try:
            text = await call_with_deadline(
                descriptor.backend.generate(prompt, descriptor.call_options),
                self.timeout_seconds,
            )
        except DeadlineExceeded as exc:
            duration_ms = _elapsed_ms(start)
            reason = str(exc)
            logger.error("Timeout calling %s after %dms", name, duration_ms)
            return self._failure(
                descriptor, anonymizer, OutcomeStatus.TIMEOUT, reason, duration_ms
            )
        except Exception as exc:
            duration_ms = _elapsed_ms(start)
            reason = str(exc) or type(exc).__name__
            logger.error("Error calling %s: %s", name, reason)
            return self._failure(
                descriptor, anonymizer, OutcomeStatus.ERROR, reason, duration_ms
            )

        duration_ms = _elapsed_ms(start)
        logger.info(
            "Received response from %s in %dms (%d chars): %s...",
            name, duration_ms, len(text), text[:200],
        )
        return BackendOutcome(descriptor=descriptor, text=text, duration_ms=duration_ms)

    @staticmethod
    def _failure(
        descriptor: BackendDescriptor,
        anonymizer: Anonymizer,
        status: OutcomeStatus,
        reason: str,
        duration_ms: int,
    ) -> BackendOutcome:
        placeholder = (
            f"Error from {anonymizer.token(descriptor)}: {anonymizer.scrub(reason)}"
        )
        return BackendOutcome(
            descriptor=descriptor,
            text=placeholder,
            status=status,
            error=reason,
            duration_ms=duration_ms,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
