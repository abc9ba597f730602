"""Linting endpoints: POST /lint, POST /fixes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from gatekeeper_authoring.api.deps import get_workspace
from gatekeeper_authoring.api.schemas import (
    CodeActionResponse,
    DiagnosticResponse,
    FixesRequest,
    FixesResponse,
    LintRequest,
    LintResponse,
)
from gatekeeper_authoring.authoring.associations import SchemaParseError, parse_schema
from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.service.workspace import PolicyWorkspace

router = APIRouter()


def _schema_or_none(schema_text: str | None) -> SchemaDocument | None:
    """Parse an inline schema; a broken one is the caller's error, not "no schema"."""
    if schema_text is None:
        return None
    try:
        return parse_schema(schema_text)
    except SchemaParseError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None


@router.post("/lint", response_model=LintResponse)
async def lint_policy(
    body: LintRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> LintResponse:
    """Report parameter references the schema does not declare."""
    schema = _schema_or_none(body.parameters_schema)
    report = workspace.lint_text(body.rego, schema)
    return LintResponse(
        clean=report.clean,
        diagnostics=[
            DiagnosticResponse(diagnostic=d.diagnostic, span=d.span) for d in report.diagnostics
        ],
    )


@router.post("/fixes", response_model=FixesResponse)
async def suggest_fixes(
    body: FixesRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> FixesResponse:
    """Quick fixes for lint diagnostics, closest schema property first."""
    schema = _schema_or_none(body.parameters_schema)
    actions = workspace.fixes_for_text(body.rego, schema, body.diagnostics)
    return FixesResponse(
        actions=[
            CodeActionResponse(title=a.title, diagnostic=a.diagnostic, fix=a.fix) for a in actions
        ]
    )
