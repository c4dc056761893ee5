"""Backend descriptor data model."""

from __future__ import annotations

from dataclasses import dataclass, field

from cognition_wheel.backends.base import CallOptions, ModelBackend


@dataclass(frozen=True)
class BackendDescriptor:
    """One active backend for the duration of a single run."""

    display_name: str
    code_name: str
    model: str
    backend: ModelBackend = field(repr=False, compare=False)
    call_options: CallOptions = field(default_factory=CallOptions)
