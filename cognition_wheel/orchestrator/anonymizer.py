"""Anonymizer — hides backend identities from the synthesizer."""

from __future__ import annotations

import re
from typing import Sequence

from cognition_wheel.models.descriptor import BackendDescriptor

TOKEN_PREFIX = "Model-"

# A name only counts when it is not glued to a longer identifier
_NAME_BOUNDARY_START = r"(?<![\w-])"
_NAME_BOUNDARY_END = r"(?![\w-]|\.\w)"


class Anonymizer:
    """Swap backend identities for code-name tokens and back.

    Tokens look like ``<<Model-Alpha>>``. Both the display name and the raw
    model id of a backend are scrubbed, case-insensitively. On the way back
    the bare ``Model-Alpha`` form is accepted too, since synthesizers
    sometimes drop the brackets; the plain word ``Alpha`` is never touched.
    """

    def __init__(self, descriptors: Sequence[BackendDescriptor]) -> None:
        if not descriptors:
            raise ValueError("At least one backend is required")
        self._by_code = {d.code_name: d.display_name for d in descriptors}
        if len(self._by_code) != len(descriptors):
            raise ValueError("Code names must be unique within a run")
        display_names = {d.display_name.casefold() for d in descriptors}
        if len(display_names) != len(descriptors):
            raise ValueError("Display names must be unique within a run")

        self._tokens = self._identity_tokens(descriptors)
        # Longest first so "gpt-5" never wins over "gpt-5-mini"
        names = "|".join(
            re.escape(n) for n in sorted(self._tokens, key=len, reverse=True)
        )
        self._scrub_re = re.compile(
            f"{_NAME_BOUNDARY_START}(?:{names}){_NAME_BOUNDARY_END}", re.IGNORECASE
        )

        codes = "|".join(
            re.escape(c) for c in sorted(self._by_code, key=len, reverse=True)
        )
        self._restore_re = re.compile(
            rf"<<{re.escape(TOKEN_PREFIX)}({codes})>>"
            rf"|\b{re.escape(TOKEN_PREFIX)}({codes})\b"
        )

    @staticmethod
    def token(descriptor: BackendDescriptor) -> str:
        return f"<<{TOKEN_PREFIX}{descriptor.code_name}>>"

    @classmethod
    def _identity_tokens(
        cls, descriptors: Sequence[BackendDescriptor]
    ) -> dict[str, str]:
        """Casefolded name -> token for every display name and model id.

        A model id shared by two backends cannot be attributed to either,
        so it is left out.
        """
        tokens = {d.display_name.casefold(): cls.token(d) for d in descriptors}
        owners: dict[str, set[str]] = {}
        for d in descriptors:
            owners.setdefault(d.model.casefold(), set()).add(cls.token(d))
        for model, model_tokens in owners.items():
            if model and len(model_tokens) == 1 and model not in tokens:
                tokens[model] = next(iter(model_tokens))
        return tokens

    def scrub(self, text: str) -> str:
        """Replace every mention of a backend's identity with its token."""
        return self._scrub_re.sub(lambda m: self._tokens[m.group(0).casefold()], text)

    def restore(self, text: str) -> str:
        """Resolve every token back to the backend's display name."""
        return self._restore_re.sub(
            lambda m: self._by_code[m.group(1) or m.group(2)], text
        )
