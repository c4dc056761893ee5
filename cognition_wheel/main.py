"""Cognition Wheel — FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from pydantic import BaseModel, Field

from cognition_wheel.config import settings
from cognition_wheel.logs import get_log_path, setup_logging, shutdown_logging
from cognition_wheel.orchestrator.assembler import to_tool_content
from cognition_wheel.orchestrator.registry import ConfigurationError, ensure_configured
from cognition_wheel.orchestrator.wheel import CognitionWheel

logger = logging.getLogger(__name__)

TOOL_NAME = "cognition_wheel"

COGNITION_WHEEL_TOOL = {
    "name": TOOL_NAME,
    "description": (
        "Consults multiple AI models (OpenAI, DeepSeek, z.ai, configurable "
        "OpenRouter models and custom OpenAI-compatible providers) in parallel, "
        "then uses one of them to synthesize all responses into a single, "
        "high-quality answer. Use this for complex questions requiring deep "
        "analysis and verification from multiple AI perspectives."
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "context": {
                "type": "string",
                "description": "Important background information and context "
                "for the problem to be solved.",
            },
            "question": {
                "type": "string",
                "description": "The specific, detailed question you want to be answered.",
            },
            "enable_internet_search": {
                "type": "boolean",
                "description": "Set to true to allow the models to search the "
                "internet for information (OpenAI only).",
            },
        },
        "required": ["context", "question", "enable_internet_search"],
    },
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_dir)
    if getattr(app.state, "wheel", None) is None:
        # Refuse to serve at all when no backend is configured
        ensure_configured(settings)
        app.state.wheel = CognitionWheel(settings)
    logger.info("Cognition Wheel server ready, logging to %s", get_log_path())
    yield
    shutdown_logging()


app = FastAPI(
    title="Cognition Wheel",
    description="Multi-model consultation and synthesis",
    version="1.0.0",
    lifespan=lifespan,
)


# --- Request / Response models ---


class ToolCallRequest(BaseModel):
    name: str
    arguments: Any = Field(default_factory=dict)


class ToolContent(BaseModel):
    type: str
    text: str


class ToolCallResponse(BaseModel):
    content: list[ToolContent]
    isError: bool = False


# --- Routes ---


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/tools")
async def list_tools():
    return {"tools": [COGNITION_WHEEL_TOOL]}


@app.post("/tools/call", response_model=ToolCallResponse)
async def call_tool(req: ToolCallRequest, request: Request):
    """Invoke a tool by name; failures come back as an error envelope, not a 5xx."""
    if req.name != TOOL_NAME:
        return ToolCallResponse(
            content=[ToolContent(type="text", text=f"Unknown tool: {req.name}")],
            isError=True,
        )

    wheel: CognitionWheel = request.app.state.wheel
    envelope = await wheel.process(req.arguments)
    return to_tool_content(envelope)


def run() -> None:
    """Console entry point: check configuration, then serve with uvicorn."""
    import uvicorn

    setup_logging(settings.log_dir)
    try:
        ensure_configured(settings)
    except ConfigurationError as exc:
        logger.error("ERROR: %s", exc)
        sys.exit(1)

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
