"""Prompt builder for the question and synthesis phases."""

from __future__ import annotations

from typing import Sequence

from cognition_wheel.models.run import RunContext

RESPONSE_SEPARATOR = "\n\n---\n\n"

SYNTHESIS_PROMPT = """\
You are synthesizing responses from multiple AI models to provide a \
comprehensive answer. The models are identified only by anonymous labels.

**Original Context:**
{context}

**Original Question:**
{question}

**Task:**
Below are {count} responses from different AI models ({labels}). Analyze them \
and create a single, comprehensive answer:
1. Identify the points on which the responses agree.
2. Identify every point of disagreement and explain which position is better \
supported, and why.
3. Produce one final answer. Weight all responses equally, regardless of \
label, and add anything the responses missed if it is evident from the context.
When you refer to a specific response, use its label exactly as written.

**Model Responses:**
---

{responses}

---

**Your Synthesis:**"""


def build_question_prompt(run: RunContext) -> str:
    """Prompt sent to every backend in the dispatch phase."""
    return f"Context: {run.context}\n\nQuestion: {run.question}"


def build_synthesis_prompt(
    run: RunContext, labeled_responses: Sequence[tuple[str, str]]
) -> str:
    """Render the synthesis prompt from (label, response) pairs.

    Pairs are rendered in the order given, which is registry order.
    """
    if not labeled_responses:
        raise ValueError("At least one response is required for synthesis")

    sections = RESPONSE_SEPARATOR.join(
        f"**{label}:**\n{text}" for label, text in labeled_responses
    )
    return SYNTHESIS_PROMPT.format(
        context=run.context,
        question=run.question,
        count=len(labeled_responses),
        labels=", ".join(label for label, _ in labeled_responses),
        responses=sections,
    )
