"""Pydantic domain models for Gatekeeper policy authoring."""

from gatekeeper_authoring.models.errors import (
    CodeAction,
    Diagnostic,
    DiagnosticSeverity,
    FixSuggestion,
    SourceSpan,
    TextRange,
)
from gatekeeper_authoring.models.schema import JSON_SCHEMA_DRAFT_07, SchemaDocument
from gatekeeper_authoring.models.status import ConstraintStatus, ConstraintViolation

__all__ = [
    "JSON_SCHEMA_DRAFT_07",
    "CodeAction",
    "ConstraintStatus",
    "ConstraintViolation",
    "Diagnostic",
    "DiagnosticSeverity",
    "FixSuggestion",
    "SchemaDocument",
    "SourceSpan",
    "TextRange",
]
