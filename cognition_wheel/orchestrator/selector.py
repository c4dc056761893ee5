"""Synthesizer selection strategies."""

from __future__ import annotations

import random
from typing import Callable, Sequence

from cognition_wheel.models.descriptor import BackendDescriptor

SynthesizerSelector = Callable[[Sequence[BackendDescriptor]], BackendDescriptor]


def priority_selector(descriptors: Sequence[BackendDescriptor]) -> BackendDescriptor:
    """Always pick the first backend in registry order."""
    if not descriptors:
        raise ValueError("Cannot select a synthesizer from an empty backend list")
    return descriptors[0]


class RandomSelector:
    """Pick a backend uniformly at random; pass a seeded Random to pin it."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def __call__(self, descriptors: Sequence[BackendDescriptor]) -> BackendDescriptor:
        if not descriptors:
            raise ValueError("Cannot select a synthesizer from an empty backend list")
        return self.rng.choice(list(descriptors))


def selector_for(policy: str) -> SynthesizerSelector:
    if policy == "priority":
        return priority_selector
    if policy == "random":
        return RandomSelector()
    raise ValueError(f"Unknown synthesizer policy: {policy!r}")
