"""Authoring endpoints: schema synthesis, template and constraint YAML."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from gatekeeper_authoring.api.deps import get_workspace
from gatekeeper_authoring.api.schemas import (
    ConstraintRequest,
    EnforcementActionRequest,
    EnforcementActionResponse,
    MarkdownResponse,
    RegoResponse,
    SynthesizeRequest,
    SynthesizeResponse,
    TemplateRegoRequest,
    TemplateRequest,
    ViolationsRequest,
    YAMLResponse,
)
from gatekeeper_authoring.authoring.associations import SchemaParseError, parse_schema
from gatekeeper_authoring.authoring.synthesizer import schema_json, synthesize_schema
from gatekeeper_authoring.authoring.templates import TemplateError, validate_constraint_name
from gatekeeper_authoring.parser.loader import ResourceFormatError, YAMLSafetyError
from gatekeeper_authoring.service.workspace import PolicyWorkspace

router = APIRouter()

# Raised for bad caller input anywhere below; all map to 422.
_INPUT_ERRORS = (SchemaParseError, TemplateError, ResourceFormatError, YAMLSafetyError, ValueError)


def _unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@router.post("/schema/synthesize", response_model=SynthesizeResponse)
async def synthesize(body: SynthesizeRequest) -> SynthesizeResponse:
    """Build a parameters schema declaring every parameter the Rego references."""
    document = synthesize_schema(body.rego)
    return SynthesizeResponse(
        parameters_schema=document.to_json_dict(),
        file_content=schema_json(document),
    )


@router.post("/templates", response_model=YAMLResponse)
async def create_template(
    body: TemplateRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> YAMLResponse:
    """ConstraintTemplate YAML from Rego plus its parameters schema."""
    try:
        schema = parse_schema(body.parameters_schema)
    except SchemaParseError as exc:
        raise _unprocessable(exc) from None
    return YAMLResponse(yaml=workspace.template_yaml(body.name, body.rego, schema))


@router.post("/templates/rego", response_model=RegoResponse)
async def template_rego(
    body: TemplateRegoRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> RegoResponse:
    """Extract the Rego from a ConstraintTemplate."""
    try:
        rego = workspace.rego_from_template_yaml(body.template_yaml)
    except _INPUT_ERRORS as exc:
        raise _unprocessable(exc) from None
    return RegoResponse(rego=rego)


@router.post("/constraints", response_model=YAMLResponse)
async def create_constraint(
    body: ConstraintRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> YAMLResponse:
    """Constraint snippet for a template, with tab stops for the values to fill in."""
    name_error = validate_constraint_name(body.name)
    if name_error:
        raise HTTPException(status_code=422, detail=name_error)
    try:
        yaml = workspace.constraint_yaml(body.template_yaml, body.name)
    except _INPUT_ERRORS as exc:
        raise _unprocessable(exc) from None
    return YAMLResponse(yaml=yaml)


@router.post("/constraints/enforcement-action", response_model=EnforcementActionResponse)
async def set_enforcement_action(
    body: EnforcementActionRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> EnforcementActionResponse:
    """Rewrite a constraint with a different enforcement action."""
    try:
        change = workspace.set_enforcement_action_yaml(body.constraint_yaml, body.action)
    except _INPUT_ERRORS as exc:
        raise _unprocessable(exc) from None
    return EnforcementActionResponse(
        yaml=change.yaml,
        previous_action=change.previous_action,
        action=change.action,
        changed=change.changed,
    )


@router.post("/constraints/violations", response_model=MarkdownResponse)
async def constraint_violations(
    body: ViolationsRequest,
    workspace: PolicyWorkspace = Depends(get_workspace),  # noqa: B008
) -> MarkdownResponse:
    """Markdown report of a constraint's audit violations."""
    try:
        markdown = workspace.violations_markdown(body.constraint_yaml)
    except _INPUT_ERRORS as exc:
        raise _unprocessable(exc) from None
    return MarkdownResponse(markdown=markdown)
