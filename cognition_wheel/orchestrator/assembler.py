"""Result assembler — success and failure envelopes."""

from __future__ import annotations

import json
from typing import Sequence

from pydantic import ValidationError

from cognition_wheel.models.descriptor import BackendDescriptor
from cognition_wheel.models.result import (
    BackendOutcome,
    DebugInfo,
    FailureEnvelope,
    OutcomeSummary,
    ResultEnvelope,
    SuccessEnvelope,
    Timing,
)


def success_envelope(
    outcomes: Sequence[BackendOutcome],
    synthesizer: BackendDescriptor,
    final_synthesis: str,
    timing: Timing,
    log_file: str,
) -> SuccessEnvelope:
    return SuccessEnvelope(
        models_used=[o.descriptor.model for o in outcomes],
        synthesizer_model=synthesizer.display_name,
        final_synthesis=final_synthesis,
        timing=timing,
        backend_outcomes=[
            OutcomeSummary(
                model=o.descriptor.model,
                status=o.status,
                duration_ms=o.duration_ms,
                error=o.error,
            )
            for o in outcomes
        ],
        debugLogFile=log_file,
    )


def failure_envelope(exc: BaseException, log_file: str) -> FailureEnvelope:
    return FailureEnvelope(error=describe_error(exc), debug=DebugInfo(log_file=log_file))


def describe_error(exc: BaseException) -> str:
    """Human-readable message for an unrecovered run error."""
    if isinstance(exc, ValidationError):
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) or "arguments" for err in exc.errors()
        )
        return (
            f"Invalid arguments ({fields}). \"context\" and \"question\" must be "
            "strings, and \"enable_internet_search\" must be a boolean."
        )
    return str(exc) or type(exc).__name__


def to_tool_content(envelope: ResultEnvelope) -> dict:
    """Wrap an envelope in the tool-call content shape."""
    text = json.dumps(envelope.model_dump(mode="json"), indent=2)
    return {
        "content": [{"type": "text", "text": text}],
        "isError": isinstance(envelope, FailureEnvelope),
    }
