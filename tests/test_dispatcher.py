"""Tests for the concurrent dispatcher."""

import time

import pytest

from cognition_wheel.backends.base import CallOptions
from cognition_wheel.models.result import OutcomeStatus
from cognition_wheel.orchestrator.anonymizer import Anonymizer
from cognition_wheel.orchestrator.dispatcher import Dispatcher

from conftest import FakeBackend, make_descriptors


@pytest.mark.asyncio
async def test_one_outcome_per_backend_in_order():
    descriptors = make_descriptors(
        FakeBackend("A", reply="r1", delay=0.05), FakeBackend("B", reply="r2")
    )

    outcomes = await Dispatcher().dispatch(descriptors, "prompt", Anonymizer(descriptors))

    assert [o.text for o in outcomes] == ["r1", "r2"]
    assert [o.descriptor for o in outcomes] == list(descriptors)
    assert all(o.ok for o in outcomes)


@pytest.mark.asyncio
async def test_failure_becomes_placeholder():
    failing = FakeBackend("A", error=RuntimeError("timeout"))
    descriptors = make_descriptors(failing, FakeBackend("B", reply="ok"))

    outcomes = await Dispatcher().dispatch(descriptors, "prompt", Anonymizer(descriptors))

    assert len(outcomes) == 2
    assert outcomes[0].status is OutcomeStatus.ERROR
    assert outcomes[0].error == "timeout"
    assert outcomes[0].text == "Error from <<Model-Alpha>>: timeout"
    assert outcomes[1].text == "ok"


@pytest.mark.asyncio
async def test_placeholder_does_not_leak_display_name():
    failing = FakeBackend("GPT-5", error=ValueError("GPT-5 returned no output text"))
    descriptors = make_descriptors(failing)

    outcomes = await Dispatcher().dispatch(descriptors, "prompt", Anonymizer(descriptors))

    assert "GPT-5" not in outcomes[0].text
    assert outcomes[0].error == "GPT-5 returned no output text"


@pytest.mark.asyncio
async def test_exception_without_message_uses_type_name():
    descriptors = make_descriptors(FakeBackend("A", error=ConnectionError()))

    outcomes = await Dispatcher().dispatch(descriptors, "p", Anonymizer(descriptors))

    assert outcomes[0].text == "Error from <<Model-Alpha>>: ConnectionError"


@pytest.mark.asyncio
async def test_hung_backend_times_out():
    descriptors = make_descriptors(
        FakeBackend("Slow", reply="late", delay=5), FakeBackend("Fast", reply="ok")
    )

    outcomes = await Dispatcher(timeout_seconds=0.05).dispatch(
        descriptors, "prompt", Anonymizer(descriptors)
    )

    assert outcomes[0].status is OutcomeStatus.TIMEOUT
    assert outcomes[0].text == "Error from <<Model-Alpha>>: timed out after 0.05s"
    assert outcomes[1].ok


@pytest.mark.asyncio
async def test_calls_run_concurrently():
    descriptors = make_descriptors(
        *(FakeBackend(name, reply=name, delay=0.2) for name in "ABCD")
    )

    start = time.perf_counter()
    await Dispatcher().dispatch(descriptors, "prompt", Anonymizer(descriptors))
    elapsed = time.perf_counter() - start

    # Sequential dispatch would take ~0.8s
    assert elapsed < 0.6


@pytest.mark.asyncio
async def test_prompt_and_options_are_passed_through():
    backend = FakeBackend("A", reply="x")
    options = CallOptions(reasoning_effort="high", web_search=True)
    descriptors = make_descriptors(backend, options=options)

    await Dispatcher().dispatch(descriptors, "the prompt", Anonymizer(descriptors))

    assert backend.prompts == ["the prompt"]
    assert backend.options == [options]


@pytest.mark.asyncio
async def test_empty_backend_list_is_rejected():
    with pytest.raises(ValueError):
        await Dispatcher().dispatch((), "p", None)


@pytest.mark.asyncio
async def test_backend_timeout_error_is_not_the_deadline():
    descriptors = make_descriptors(
        FakeBackend("A", error=TimeoutError("connect timed out")),
        FakeBackend("B", reply="ok"),
    )

    outcomes = await Dispatcher(timeout_seconds=300).dispatch(
        descriptors, "prompt", Anonymizer(descriptors)
    )

    assert outcomes[0].status is OutcomeStatus.ERROR
    assert outcomes[0].error == "connect timed out"
    assert outcomes[0].text == "Error from <<Model-Alpha>>: connect timed out"
