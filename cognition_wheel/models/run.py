"""Run input data model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class RunContext(BaseModel):
    """Validated arguments of one ``cognition_wheel`` call."""

    model_config = ConfigDict(frozen=True)

    context: StrictStr
    question: StrictStr
    enable_internet_search: bool = False
