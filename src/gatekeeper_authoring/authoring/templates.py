"""ConstraintTemplate and constraint resource construction.

A ConstraintTemplate contains:

* ``spec.crd.spec`` -- normal CRD naming plus ``validation.openAPIV3Schema``,
  the parameters schema
* ``spec.targets`` -- a list of ``{target, rego}``

Deploying it creates a CRD whose instances are *constraints*::

    apiVersion: constraints.gatekeeper.sh/v1beta1
    kind: <spec.crd.spec.names.kind>
    spec:
      enforcementAction: deny | dryrun
      match: {kinds: [...]}
      parameters: <as described by the schema>
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gatekeeper_authoring.models.schema import SchemaDocument

TEMPLATE_API_VERSION = "templates.gatekeeper.sh/v1beta1"
CONSTRAINT_API_VERSION = "constraints.gatekeeper.sh/v1beta1"
ADMISSION_TARGET = "admission.k8s.gatekeeper.sh"

ENFORCEMENT_ACTIONS = ("deny", "dryrun")
DEFAULT_ENFORCEMENT_ACTION = "deny"

_CONSTRAINT_NAME_RE = re.compile(r"^[a-z][-a-z0-9.]*$")
_NON_ALPHANUMERIC_RE = re.compile(r"[^a-zA-Z0-9]")


class TemplateError(Exception):
    """Raised when a template lacks what a constraint or Rego lookup needs."""


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def identifierfy(name: str) -> str:
    """``k8s-required_labels`` -> ``k8srequiredlabels``."""
    return _NON_ALPHANUMERIC_RE.sub("", name).lower()


def kindify(name: str) -> str:
    """``k8s-required_labels`` -> ``K8sRequiredLabels``."""
    if not name:
        return ""
    return "".join(_title_case(bit) for bit in _NON_ALPHANUMERIC_RE.split(name))


def _title_case(s: str) -> str:
    return s[:1].upper() + s[1:]


def template_name_for(source_path: str | Path) -> str:
    # TODO: prefer the Rego package name once the source is parsed for it.
    return identifierfy(Path(source_path).stem)


def validate_constraint_name(name: str) -> str | None:
    """Return an error message for an unusable constraint name, else ``None``."""
    if _CONSTRAINT_NAME_RE.match(name):
        return None
    return "Name must begin with a letter and contain only letters, numbers, hyphens and periods"


# ---------------------------------------------------------------------------
# ConstraintTemplate
# ---------------------------------------------------------------------------


def build_constraint_template(name: str, rego: str, schema: SchemaDocument) -> dict[str, Any]:
    """Combine Rego and its parameters schema into a ConstraintTemplate resource."""
    kind = kindify(name)
    identifier = identifierfy(name)
    return {
        "apiVersion": TEMPLATE_API_VERSION,
        "kind": "ConstraintTemplate",
        "metadata": {"name": name},
        "spec": {
            "crd": {
                "spec": {
                    "names": {
                        "kind": kind,
                        "listKind": kind + "List",
                        "plural": identifier,
                        "singular": identifier,
                    },
                    "validation": {"openAPIV3Schema": schema.to_json_dict()},
                }
            },
            "targets": [{"target": ADMISSION_TARGET, "rego": rego}],
        },
    }


def rego_from_template(template: dict[str, Any]) -> str:
    targets = (template.get("spec") or {}).get("targets") or []
    for target in targets:
        if isinstance(target, dict) and isinstance(target.get("rego"), str):
            return target["rego"]
    name = (template.get("metadata") or {}).get("name", "<unnamed>")
    raise TemplateError(f"Template '{name}' does not contain any Rego")


# ---------------------------------------------------------------------------
# Constraint
# ---------------------------------------------------------------------------


def placeholder(
    index: int,
    *,
    default: str | None = None,
    choices: list[str] | tuple[str, ...] | None = None,
) -> str:
    """An editor snippet tab stop: ``${1}``, ``${1:default}`` or ``${1|a,b|}``."""
    if default:
        return f"${{{index}:{default}}}"
    if choices:
        return f"${{{index}|{','.join(choices)}|}}"
    return f"${{{index}}}"


def build_constraint(template: dict[str, Any], constraint_name: str) -> dict[str, Any]:
    """A constraint snippet for *template*, with tab stops for every value to fill in."""
    crd_spec = ((template.get("spec") or {}).get("crd") or {}).get("spec")
    if not crd_spec:
        raise TemplateError("Template does not contain a custom resource spec")
    kind = (crd_spec.get("names") or {}).get("kind")
    if not kind:
        raise TemplateError(
            "Template does not specify a kind for the constraint custom resource type"
        )

    raw_schema = (crd_spec.get("validation") or {}).get("openAPIV3Schema")
    schema = None
    if isinstance(raw_schema, dict):
        try:
            schema = SchemaDocument.model_validate(raw_schema)
        except ValidationError as exc:
            raise TemplateError(f"Template parameters schema is malformed: {exc}") from exc

    return {
        "apiVersion": CONSTRAINT_API_VERSION,
        "kind": kind,
        "metadata": {"name": placeholder(1, default=constraint_name)},
        "spec": {
            "enforcementAction": placeholder(2, choices=("dryrun", "deny")),
            "match": {"kinds": []},
            "parameters": _placeholder_parameters(schema, first_index=3),
        },
    }


def _placeholder_parameters(schema: SchemaDocument | None, first_index: int) -> dict[str, Any]:
    if schema is None or schema.properties is None:
        return {}
    parameters: dict[str, Any] = {}
    for index, (name, property_schema) in enumerate(schema.properties.items(), start=first_index):
        tab_stop = placeholder(index)
        is_array = isinstance(property_schema, SchemaDocument) and property_schema.type == "array"
        parameters[name] = [tab_stop] if is_array else tab_stop
    return parameters


# ---------------------------------------------------------------------------
# Enforcement action
# ---------------------------------------------------------------------------


def current_enforcement_action(constraint: dict[str, Any]) -> str:
    return (constraint.get("spec") or {}).get("enforcementAction") or DEFAULT_ENFORCEMENT_ACTION


def with_enforcement_action(constraint: dict[str, Any], action: str) -> dict[str, Any]:
    """Copy of *constraint* with ``spec.enforcementAction`` set to *action*."""
    if action not in ENFORCEMENT_ACTIONS:
        raise ValueError(
            f"Unknown enforcement action '{action}'. Available: {', '.join(ENFORCEMENT_ACTIONS)}"
        )
    updated = copy.deepcopy(constraint)
    spec = updated.get("spec")
    if not isinstance(spec, dict):
        spec = updated["spec"] = {}
    spec["enforcementAction"] = action
    return updated
