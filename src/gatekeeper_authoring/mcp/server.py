"""FastMCP server exposing Gatekeeper policy authoring as MCP tools.

Run via::

    gatekeeper-mcp                                  # reads .env (default: stdio)
    GATEKEEPER_MCP_TRANSPORT=http gatekeeper-mcp    # streamable HTTP on port 9000

All tools take policy text and resource YAML as arguments; nothing is read
from or written to a cluster.
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from gatekeeper_authoring import __version__
from gatekeeper_authoring.authoring.associations import SchemaParseError, parse_schema
from gatekeeper_authoring.authoring.synthesizer import schema_json, synthesize_schema
from gatekeeper_authoring.authoring.templates import TemplateError, validate_constraint_name
from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.parser.loader import ResourceFormatError, YAMLSafetyError
from gatekeeper_authoring.service.workspace import PolicyWorkspace
from gatekeeper_authoring.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("gatekeeper_authoring.mcp")

mcp = FastMCP("Gatekeeper Authoring")
_workspace = PolicyWorkspace()

_INPUT_ERRORS = (SchemaParseError, TemplateError, ResourceFormatError, YAMLSafetyError, ValueError)


def _parse_schema_arg(parameters_schema: str | None) -> SchemaDocument | None:
    if parameters_schema is None:
        return None
    try:
        return parse_schema(parameters_schema)
    except SchemaParseError as exc:
        raise ToolError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
def lint_policy(rego: str, parameters_schema: str | None = None) -> str:
    """Check a Rego policy's ``input.parameters.*`` references against its schema.

    Args:
        rego: Rego policy source.
        parameters_schema: The policy's parameters schema as JSON.  Without
            one there is nothing to check against and no findings are reported.
    """
    logger.info("lint_policy called (rego length=%d)", len(rego))
    schema = _parse_schema_arg(parameters_schema)
    report = _workspace.lint_text(rego, schema)
    if report.clean:
        return "No problems found."

    lines = [f"Found {len(report.diagnostics)} problem(s):"]
    for located in report.diagnostics:
        d = located.diagnostic
        lines.append(f"  {located.span.line}:{located.span.column} [{d.code}] {d.message}")
    return "\n".join(lines)


@mcp.tool
def suggest_fixes(rego: str, parameters_schema: str) -> str:
    """Suggest schema property names for undefined parameter references.

    Args:
        rego: Rego policy source.
        parameters_schema: The policy's parameters schema as JSON.
    """
    logger.info("suggest_fixes called (rego length=%d)", len(rego))
    schema = _parse_schema_arg(parameters_schema)
    report = _workspace.lint_text(rego, schema)
    if report.clean:
        return "No problems found."

    diagnostics = [located.diagnostic for located in report.diagnostics]
    actions = _workspace.fixes_for_text(rego, schema, diagnostics)
    lines = []
    for located in report.diagnostics:
        d = located.diagnostic
        names = [a.fix.replacement_text for a in actions if a.diagnostic == d]
        line = f"  {located.span.line}:{located.span.column} {d.message}"
        if names:
            line += f"  Did you mean: {', '.join(names)}?"
        else:
            line += "  (no close match)"
        lines.append(line)
    return "\n".join(lines)


@mcp.tool
def synthesize_parameters_schema(rego: str) -> str:
    """Create a parameters schema declaring every parameter the Rego references.

    Indexed references (``input.parameters.x[_]``) are declared as string
    arrays, all others as strings.
    """
    logger.info("synthesize_parameters_schema called (rego length=%d)", len(rego))
    return schema_json(synthesize_schema(rego))


@mcp.tool
def build_constraint_template(name: str, rego: str, parameters_schema: str) -> str:
    """Combine Rego and its parameters schema into ConstraintTemplate YAML.

    Args:
        name: Template name; also determines the constraint kind.
        rego: Rego policy source.
        parameters_schema: The policy's parameters schema as JSON.
    """
    logger.info("build_constraint_template called (name=%s)", name)
    try:
        schema = parse_schema(parameters_schema)
    except SchemaParseError as exc:
        raise ToolError(str(exc)) from exc
    return _workspace.template_yaml(name, rego, schema)


@mcp.tool
def build_constraint(template_yaml: str, name: str) -> str:
    """Create a constraint snippet for a ConstraintTemplate.

    Values to fill in are editor tab stops (``${3}``), one per parameter.
    """
    logger.info("build_constraint called (name=%s)", name)
    name_error = validate_constraint_name(name)
    if name_error:
        raise ToolError(name_error)
    try:
        return _workspace.constraint_yaml(template_yaml, name)
    except _INPUT_ERRORS as exc:
        logger.warning("build_constraint failed: %s", exc)
        raise ToolError(str(exc)) from exc


@mcp.tool
def set_enforcement_action(constraint_yaml: str, action: str) -> str:
    """Rewrite a constraint with a new enforcement action (``deny`` or ``dryrun``).

    Returns the updated constraint YAML, preceded by a comment line naming
    the action it replaced.
    """
    logger.info("set_enforcement_action called (action=%s)", action)
    try:
        change = _workspace.set_enforcement_action_yaml(constraint_yaml, action)
    except _INPUT_ERRORS as exc:
        raise ToolError(str(exc)) from exc
    if not change.changed:
        return f"# enforcementAction is already {action}\n{change.yaml}"
    return f"# enforcementAction: {change.previous_action} -> {action}\n{change.yaml}"


@mcp.tool
def show_violations(constraint_yaml: str) -> str:
    """Render a constraint's audit violations as Markdown."""
    try:
        return _workspace.violations_markdown(constraint_yaml)
    except _INPUT_ERRORS as exc:
        raise ToolError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "Gatekeeper Authoring MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
