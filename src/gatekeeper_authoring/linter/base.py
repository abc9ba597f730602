"""Linter interface and the registry of linters run over Rego documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from gatekeeper_authoring.models.errors import CodeAction, Diagnostic
from gatekeeper_authoring.models.schema import SchemaDocument


class Linter(ABC):
    """A check over Rego source that can also offer fixes for its own findings."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def lint(self, text: str, schema: SchemaDocument | None) -> list[Diagnostic]:
        """Diagnose *text* against the parameters schema (``None`` if unavailable)."""

    @abstractmethod
    def fixes(
        self,
        text: str,
        schema: SchemaDocument | None,
        diagnostics: Sequence[Diagnostic],
    ) -> list[CodeAction]:
        """Quick fixes for those of *diagnostics* this linter produced."""


def lint_all(
    linters: Sequence[Linter], text: str, schema: SchemaDocument | None
) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for linter in linters:
        diagnostics.extend(linter.lint(text, schema))
    return diagnostics


def fixes_all(
    linters: Sequence[Linter],
    text: str,
    schema: SchemaDocument | None,
    diagnostics: Sequence[Diagnostic],
) -> list[CodeAction]:
    actions: list[CodeAction] = []
    for linter in linters:
        actions.extend(linter.fixes(text, schema, diagnostics))
    return actions
