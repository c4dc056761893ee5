"""Backend outcome and result envelope data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from cognition_wheel.models.descriptor import BackendDescriptor


class OutcomeStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class BackendOutcome:
    """What one backend produced during the dispatch phase.

    ``text`` is always filled: the generated answer on success, or a
    placeholder naming the backend and the failure otherwise.
    """

    descriptor: BackendDescriptor
    text: str
    status: OutcomeStatus = OutcomeStatus.OK
    error: str | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK


class Timing(BaseModel):
    total_duration_ms: int
    parallel_duration_ms: int
    synthesis_duration_ms: int


class OutcomeSummary(BaseModel):
    model: str
    status: OutcomeStatus
    duration_ms: int
    error: str | None = None


class SuccessEnvelope(BaseModel):
    models_used: list[str]
    synthesizer_model: str
    final_synthesis: str
    timing: Timing
    backend_outcomes: list[OutcomeSummary]
    debugLogFile: str
    status: Literal["success"] = "success"


class DebugInfo(BaseModel):
    log_file: str


class FailureEnvelope(BaseModel):
    error: str
    debug: DebugInfo
    status: Literal["failed"] = "failed"


ResultEnvelope = SuccessEnvelope | FailureEnvelope
