"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gatekeeper_authoring.models.errors import Diagnostic, FixSuggestion, SourceSpan


class DiagnosticResponse(BaseModel):
    """A diagnostic plus its line/column span."""

    diagnostic: Diagnostic
    span: SourceSpan


class LintRequest(BaseModel):
    """Request body for POST /lint."""

    rego: str = Field(description="Rego policy source")
    parameters_schema: str | None = Field(
        default=None, description="Parameters schema JSON; omit if the policy has none yet"
    )


class LintResponse(BaseModel):
    """Response body for POST /lint."""

    clean: bool
    diagnostics: list[DiagnosticResponse] = []


class FixesRequest(BaseModel):
    """Request body for POST /fixes.

    When ``diagnostics`` is omitted the Rego is linted first and fixes are
    offered for everything found.
    """

    rego: str
    parameters_schema: str | None = None
    diagnostics: list[Diagnostic] | None = None


class CodeActionResponse(BaseModel):
    title: str
    diagnostic: Diagnostic
    fix: FixSuggestion


class FixesResponse(BaseModel):
    """Response body for POST /fixes."""

    actions: list[CodeActionResponse] = []


class SynthesizeRequest(BaseModel):
    """Request body for POST /schema/synthesize."""

    rego: str


class SynthesizeResponse(BaseModel):
    parameters_schema: dict = Field(description="Synthesized parameters schema")  # type: ignore[type-arg]
    file_content: str = Field(description="The schema as written to a .schema.json file")


class TemplateRequest(BaseModel):
    """Request body for POST /templates."""

    name: str = Field(description="Template name; also drives the constraint kind")
    rego: str
    parameters_schema: str


class ConstraintRequest(BaseModel):
    """Request body for POST /constraints."""

    template_yaml: str
    name: str


class TemplateRegoRequest(BaseModel):
    """Request body for POST /templates/rego."""

    template_yaml: str


class EnforcementActionRequest(BaseModel):
    """Request body for POST /constraints/enforcement-action."""

    constraint_yaml: str
    action: str


class ViolationsRequest(BaseModel):
    """Request body for POST /constraints/violations."""

    constraint_yaml: str


class EnforcementActionResponse(BaseModel):
    """Response body for POST /constraints/enforcement-action."""

    yaml: str
    previous_action: str
    action: str
    changed: bool


class YAMLResponse(BaseModel):
    yaml: str


class RegoResponse(BaseModel):
    rego: str


class MarkdownResponse(BaseModel):
    markdown: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
