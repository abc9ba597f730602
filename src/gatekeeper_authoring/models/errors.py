"""Diagnostics and fix suggestions anchored to offsets in policy source text."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class DiagnosticSeverity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


class TextRange(BaseModel):
    """Half-open ``[start, end)`` span of codepoint offsets into a source text."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> TextRange:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid text range [{self.start}, {self.end})")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


class SourceSpan(BaseModel):
    """Points to exact location in policy source for display (1-based)."""

    file: str | None = None
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class Diagnostic(BaseModel):
    """A lint finding over a range of the policy source."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    code: str
    source: str = "gatekeeper"


class FixSuggestion(BaseModel):
    """A textual replacement proposed for a diagnostic's range.

    ``distance`` is the edit distance between the replacement and the text
    currently in the range; lower is better.
    """

    model_config = ConfigDict(frozen=True)

    replacement_text: str
    range: TextRange
    distance: int

    def apply(self, text: str) -> str:
        """Return *text* with exactly :attr:`range` replaced."""
        return text[: self.range.start] + self.replacement_text + text[self.range.end :]


class CodeAction(BaseModel):
    """A quick fix offered to the editor: a titled suggestion for one diagnostic."""

    title: str
    diagnostic: Diagnostic
    fix: FixSuggestion
