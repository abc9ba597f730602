"""Scans Rego source for ``input.parameters.<name>`` references.

This is a text scan, not a Rego parse: anything that looks like a parameter
reference counts, including occurrences inside comments and strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from gatekeeper_authoring.models.errors import TextRange

PARAMETERS_PREFIX = "input.parameters."

# The prefix is matched case-insensitively, so the identifier class is too:
# ``[a-z]`` also admits upper-case letters and the captured case is preserved.
# ASCII only: without it IGNORECASE folds letters such as ``\u017f`` onto ``s``.
PARAMETER_REF_PATTERN = re.compile(
    r"input\.parameters\.([a-z][a-z0-9_]*)(\[)?",
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True)
class ParameterReference:
    """One occurrence of a parameter reference.

    ``offset``/``length`` locate the bare identifier, excluding the
    ``input.parameters.`` prefix and any trailing ``[``.
    """

    name: str
    is_array: bool
    offset: int
    length: int

    @property
    def range(self) -> TextRange:
        return TextRange(start=self.offset, end=self.offset + self.length)


def extract_parameter_references(text: str) -> Iterator[ParameterReference]:
    """Yield every parameter reference in *text*, left to right.

    Matches never overlap. Every call starts a fresh scan from the top of the
    text, so the result can be re-requested at will.
    """
    cursor = 0
    while True:
        match = PARAMETER_REF_PATTERN.search(text, cursor)
        if match is None:
            return
        name = match.group(1)
        yield ParameterReference(
            name=name,
            is_array=match.group(2) is not None,
            offset=match.start(1),
            length=len(name),
        )
        cursor = match.end()
