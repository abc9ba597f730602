"""Flags ``input.parameters.<name>`` references the parameters schema does not declare.

If the Rego refers to ``input.parameters.foo`` then the associated schema
should have a property named ``foo``. Each undefined reference gets a warning
over the bare identifier, and fixes that swap in the closest declared names.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from operator import attrgetter

from gatekeeper_authoring.linter.base import Linter
from gatekeeper_authoring.linter.distance import levenshtein
from gatekeeper_authoring.models.errors import (
    CodeAction,
    Diagnostic,
    DiagnosticSeverity,
    FixSuggestion,
)
from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.parser.extractor import extract_parameter_references

DIAGNOSTIC_NO_DEFINITION = "no_definition"

MAX_FIX_DISTANCE = 10
MAX_FIX_SUGGESTIONS = 5


@dataclass(frozen=True)
class Candidate:
    property_name: str
    distance: int


def lint(text: str, schema: SchemaDocument | None) -> list[Diagnostic]:
    """One warning per reference whose name is not a schema property, in source order.

    Without a schema, or with one that declares no ``properties``, there is
    nothing to check against and the result is empty.
    """
    if schema is None or schema.properties is None:
        return []

    diagnostics: list[Diagnostic] = []
    for reference in extract_parameter_references(text):
        if schema.declares(reference.name):
            continue
        diagnostics.append(
            Diagnostic(
                range=reference.range,
                message=f"Schema file does not define property '{reference.name}'",
                severity=DiagnosticSeverity.WARNING,
                code=DIAGNOSTIC_NO_DEFINITION,
            )
        )
    return diagnostics


def rank_candidates(faulty: str, names: Sequence[str]) -> list[Candidate]:
    """Closest names first; ties keep the order of *names*.

    Candidates further than ``MAX_FIX_DISTANCE`` are dropped and at most
    ``MAX_FIX_SUGGESTIONS`` are kept.
    """
    candidates = [Candidate(name, levenshtein(name, faulty)) for name in names]
    candidates.sort(key=attrgetter("distance"))
    within_tolerance = [c for c in candidates if c.distance <= MAX_FIX_DISTANCE]
    return within_tolerance[:MAX_FIX_SUGGESTIONS]


def propose_fixes(
    diagnostic: Diagnostic, text: str, schema: SchemaDocument | None
) -> list[FixSuggestion]:
    """Replacement suggestions for a ``no_definition`` diagnostic, best first."""
    if diagnostic.code != DIAGNOSTIC_NO_DEFINITION:
        return []
    if schema is None or schema.properties is None:
        return []

    # Read the name back out of the text rather than the message so the fix
    # matches what is on screen now.
    faulty = diagnostic.range.slice(text)
    return [
        FixSuggestion(
            replacement_text=candidate.property_name,
            range=diagnostic.range,
            distance=candidate.distance,
        )
        for candidate in rank_candidates(faulty, schema.property_names)
    ]


class UndefinedParametersLinter(Linter):
    @property
    def name(self) -> str:
        return "undefined-parameters"

    def lint(self, text: str, schema: SchemaDocument | None) -> list[Diagnostic]:
        return lint(text, schema)

    def fixes(
        self,
        text: str,
        schema: SchemaDocument | None,
        diagnostics: Sequence[Diagnostic],
    ) -> list[CodeAction]:
        actions: list[CodeAction] = []
        for diagnostic in diagnostics:
            for fix in propose_fixes(diagnostic, text, schema):
                actions.append(
                    CodeAction(
                        title=f"Change to '{fix.replacement_text}'",
                        diagnostic=diagnostic,
                        fix=fix,
                    )
                )
        return actions


UNDEFINED_PARAMETERS_LINTER = UndefinedParametersLinter()
