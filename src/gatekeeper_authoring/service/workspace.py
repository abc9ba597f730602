"""Policy workspace: file-level authoring operations reused by MCP and REST API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gatekeeper_authoring.authoring.associations import (
    SchemaLookupStatus,
    associated_schema_path,
    lookup_schema,
)
from gatekeeper_authoring.authoring.synthesizer import empty_schema, schema_json, synthesize_schema
from gatekeeper_authoring.authoring.templates import (
    build_constraint,
    build_constraint_template,
    current_enforcement_action,
    rego_from_template,
    template_name_for,
    with_enforcement_action,
)
from gatekeeper_authoring.linter import LINTERS, Linter, fixes_all, lint_all
from gatekeeper_authoring.models.errors import CodeAction, Diagnostic, SourceSpan
from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.parser.loader import ResourceLoader, dump_yaml
from gatekeeper_authoring.parser.source import SourceText
from gatekeeper_authoring.service.violations import render_violations_markdown

logger = logging.getLogger("gatekeeper_authoring.workspace")

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


class WorkspaceError(Exception):
    """Raised when a file-level authoring operation cannot proceed."""


@dataclass
class LocatedDiagnostic:
    """A diagnostic together with its line/column span for display."""

    diagnostic: Diagnostic
    span: SourceSpan


@dataclass
class LintReport:
    """Result of linting one Rego document."""

    file: str | None
    schema_status: SchemaLookupStatus | None
    diagnostics: list[LocatedDiagnostic] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.diagnostics


@dataclass
class EnforcementActionChange:
    """A constraint rewritten with a new enforcement action."""

    previous_action: str
    action: str
    yaml: str

    @property
    def changed(self) -> bool:
        return self.previous_action != self.action


@dataclass
class SchemaFileResult:
    """Where a Rego file's schema lives and whether it was just written."""

    path: Path
    created: bool


# ---------------------------------------------------------------------------
# PolicyWorkspace
# ---------------------------------------------------------------------------


class PolicyWorkspace:
    """Authoring operations over Rego files and Gatekeeper resource YAML.

    Holds no per-document state: schemas are looked up afresh on every call,
    so one instance can be shared between requests.
    """

    def __init__(self, linters: Sequence[Linter] = LINTERS) -> None:
        self._linters = tuple(linters)
        self._loader = ResourceLoader()

    # -- linting -------------------------------------------------------------

    def lint_text(
        self,
        text: str,
        schema: SchemaDocument | None,
        file: str | None = None,
        schema_status: SchemaLookupStatus | None = None,
    ) -> LintReport:
        source = SourceText(text, file=file)
        diagnostics = lint_all(self._linters, text, schema)
        return LintReport(
            file=file,
            schema_status=schema_status,
            diagnostics=[LocatedDiagnostic(d, source.span(d.range)) for d in diagnostics],
        )

    def lint_file(self, path: str | Path) -> LintReport:
        """Lint a Rego file against its sibling ``.schema.json``."""
        path = Path(path)
        text = self._read_source(path)
        lookup = lookup_schema(path)
        if not lookup.found:
            logger.debug("No usable schema for %s (%s)", path, lookup.status)
        report = self.lint_text(text, lookup.or_none(), file=str(path), schema_status=lookup.status)
        logger.info("Linted %s: %d diagnostic(s)", path, len(report.diagnostics))
        return report

    def fixes_for_text(
        self,
        text: str,
        schema: SchemaDocument | None,
        diagnostics: Sequence[Diagnostic] | None = None,
    ) -> list[CodeAction]:
        """Quick fixes for *diagnostics*, or for everything the linters find now."""
        if diagnostics is None:
            diagnostics = lint_all(self._linters, text, schema)
        return fixes_all(self._linters, text, schema, diagnostics)

    def fixes_for_file(self, path: str | Path) -> list[CodeAction]:
        path = Path(path)
        return self.fixes_for_text(self._read_source(path), lookup_schema(path).or_none())

    # -- schema files --------------------------------------------------------

    def open_parameters_schema(
        self, source_path: str | Path, *, synthesize: bool = True
    ) -> SchemaFileResult:
        """Return the Rego file's schema path, creating the file if it is missing.

        A new schema declares every parameter the Rego references when
        *synthesize* is set, otherwise none.
        """
        source_path = Path(source_path)
        schema_path = associated_schema_path(source_path)
        if schema_path.exists():
            return SchemaFileResult(path=schema_path, created=False)

        if synthesize:
            document = synthesize_schema(self._read_source(source_path))
        else:
            document = empty_schema()
        schema_path.write_text(schema_json(document), encoding="utf-8")
        logger.info("Created parameters schema %s", schema_path)
        return SchemaFileResult(path=schema_path, created=True)

    # -- resources -----------------------------------------------------------

    def template_yaml_for_file(self, path: str | Path) -> str:
        """ConstraintTemplate YAML combining a Rego file and its schema."""
        path = Path(path)
        lookup = lookup_schema(path)
        if lookup.status is SchemaLookupStatus.NOT_FOUND:
            raise WorkspaceError(f"No associated schema: expected {lookup.path}")
        if lookup.document is None:
            raise WorkspaceError(f"Associated schema {lookup.path} is invalid: {lookup.error}")
        rego = self._read_source(path)
        template = build_constraint_template(template_name_for(path), rego, lookup.document)
        return dump_yaml(template)

    def template_yaml(self, name: str, rego: str, schema: SchemaDocument) -> str:
        return dump_yaml(build_constraint_template(name, rego, schema))

    def constraint_yaml(self, template_yaml: str, constraint_name: str) -> str:
        template = self._loader.load_string(template_yaml)
        return dump_yaml(build_constraint(template, constraint_name))

    def rego_from_template_yaml(self, template_yaml: str) -> str:
        return rego_from_template(self._loader.load_string(template_yaml))

    def violations_markdown(self, constraint_yaml: str) -> str:
        return render_violations_markdown(self._loader.load_string(constraint_yaml))

    def set_enforcement_action_yaml(
        self, constraint_yaml: str, action: str
    ) -> EnforcementActionChange:
        """Rewrite a constraint with *action*, reporting the action it had before."""
        constraint = self._loader.load_string(constraint_yaml)
        previous = current_enforcement_action(constraint)
        updated = dump_yaml(with_enforcement_action(constraint, action))
        logger.info(
            "Enforcement action of %s: %s -> %s",
            (constraint.get("metadata") or {}).get("name", "<unnamed>"),
            previous,
            action,
        )
        return EnforcementActionChange(previous_action=previous, action=action, yaml=updated)

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _read_source(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise WorkspaceError(f"Cannot read {path}: {exc}") from exc
