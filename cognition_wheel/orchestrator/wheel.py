"""Cognition Wheel — consult every backend, then synthesize one answer."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, Callable

from cognition_wheel.config import Settings
from cognition_wheel.config import settings as default_settings
from cognition_wheel.logs import get_log_path
from cognition_wheel.models.descriptor import BackendDescriptor
from cognition_wheel.models.result import ResultEnvelope, Timing
from cognition_wheel.models.run import RunContext
from cognition_wheel.orchestrator.anonymizer import Anonymizer
from cognition_wheel.orchestrator.assembler import failure_envelope, success_envelope
from cognition_wheel.orchestrator.dispatcher import (
    DeadlineExceeded,
    Dispatcher,
    call_with_deadline,
)
from cognition_wheel.orchestrator.prompts import (
    build_question_prompt,
    build_synthesis_prompt,
)
from cognition_wheel.orchestrator.registry import build_registry
from cognition_wheel.orchestrator.selector import SynthesizerSelector, selector_for

logger = logging.getLogger(__name__)

RegistryBuilder = Callable[[Settings, bool], tuple[BackendDescriptor, ...]]


class SynthesisError(RuntimeError):
    """The synthesis call failed or did not finish in time."""


class CognitionWheel:
    """Runs the two-phase consult-then-synthesize process.

    The backend list is rebuilt from settings on every call to ``process``,
    so concurrent runs never share descriptors.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        selector: SynthesizerSelector | None = None,
        registry: RegistryBuilder | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.selector = selector or selector_for(self.settings.synthesizer_policy)
        self.registry = registry or build_registry
        self.dispatcher = dispatcher or Dispatcher(self.settings.backend_timeout_seconds)

    async def process(self, arguments: Any) -> ResultEnvelope:
        """Orchestrate parallel calls, anonymized synthesis and result assembly.

        Never raises for run-level problems; they come back as a failed
        envelope carrying the log file path.
        """
        start = time.perf_counter()
        try:
            run = RunContext.model_validate(arguments)
            descriptors = self.registry(self.settings, run.enable_internet_search)
            logger.info(
                "Starting Cognition Wheel process (search=%s, models=%s)",
                run.enable_internet_search,
                [d.display_name for d in descriptors],
            )
            anonymizer = Anonymizer(descriptors)

            # 1. Dispatch phase
            dispatch_start = time.perf_counter()
            outcomes = await self.dispatcher.dispatch(
                descriptors, build_question_prompt(run), anonymizer
            )
            parallel_ms = _elapsed_ms(dispatch_start)
            logger.info(
                "All model responses received in %dms (lengths=%s, failures=%d)",
                parallel_ms,
                [len(o.text) for o in outcomes],
                sum(1 for o in outcomes if not o.ok),
            )

            # 2. Synthesis phase
            synthesizer = self.selector(descriptors)
            if synthesizer not in descriptors:
                raise SynthesisError(
                    f"Selected synthesizer {synthesizer.display_name} is not active"
                )
            logger.info("Using %s as the synthesizer.", synthesizer.display_name)

            labeled = [
                (
                    anonymizer.token(o.descriptor),
                    anonymizer.scrub(o.text) if o.ok else o.text,
                )
                for o in outcomes
            ]
            prompt = build_synthesis_prompt(run, labeled)
            logger.info("Generating final synthesis (prompt length=%d)", len(prompt))

            synth_start = time.perf_counter()
            raw_answer = await self._synthesize(synthesizer, prompt)
            synthesis_ms = _elapsed_ms(synth_start)
            final_answer = anonymizer.restore(raw_answer)
            logger.info(
                "Final synthesis completed in %dms (%d chars)",
                synthesis_ms,
                len(final_answer),
            )

            total_ms = _elapsed_ms(start)
            envelope = success_envelope(
                outcomes,
                synthesizer,
                final_answer,
                Timing(
                    total_duration_ms=total_ms,
                    parallel_duration_ms=parallel_ms,
                    synthesis_duration_ms=synthesis_ms,
                ),
                get_log_path(),
            )
            logger.info("Process completed successfully in %dms", total_ms)
            return envelope

        except Exception as exc:
            logger.exception("An error occurred in the Cognition Wheel")
            return failure_envelope(exc, get_log_path())

    async def _synthesize(self, synthesizer: BackendDescriptor, prompt: str) -> str:
        # Web search is a dispatch-phase tool only
        options = dataclasses.replace(synthesizer.call_options, web_search=False)
        timeout = self.dispatcher.timeout_seconds
        try:
            return await call_with_deadline(
                synthesizer.backend.generate(prompt, options), timeout
            )
        except DeadlineExceeded as exc:
            raise SynthesisError(
                f"Synthesis by {synthesizer.display_name} timed out after {timeout:g}s"
            ) from exc


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
