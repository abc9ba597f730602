"""Markdown report of a constraint's audit violations."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ValidationError

from gatekeeper_authoring.models.status import ConstraintStatus, ConstraintViolation

MD_HORIZONTAL_RULE = "\n---\n"


def constraint_status(constraint: dict[str, Any]) -> ConstraintStatus | None:
    """Parse ``status`` from a constraint resource; ``None`` if absent or unreadable."""
    raw_status = constraint.get("status")
    if not isinstance(raw_status, dict):
        return None
    try:
        return ConstraintStatus.model_validate(raw_status)
    except ValidationError:
        return None


def _display_timestamp(timestamp: datetime | None) -> str:
    if timestamp is None:
        return "unknown time"
    return timestamp.strftime("%H:%M:%S")


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def _render_violation(violation: ConstraintViolation) -> str:
    cells = (violation.kind, violation.name, violation.message)
    return "| " + " | ".join(_escape_cell(c) for c in cells) + " |"


def _render_status(status: ConstraintStatus | None) -> list[str]:
    if status is None:
        return ["Status information not available"]

    when = _display_timestamp(status.audit_timestamp)
    if not status.violations:
        return [f"No constraint violations (at {when})"]

    return [
        f"{len(status.violations)} constraint violation(s) at {when}",
        "| Resource Kind | Resource Name | Violation |",
        "|---|---|---|",
        *(_render_violation(v) for v in status.violations),
    ]


def render_violations_markdown(constraint: dict[str, Any]) -> str:
    """Render *constraint*'s audit results as Markdown.

    The heading names the constraint and the template (its ``kind``) it
    instantiates; the body is a table of violating resources.
    """
    name = (constraint.get("metadata") or {}).get("name", "<unnamed>")
    template_kind = constraint.get("kind", "<unknown>")
    return "\n".join(
        [
            f"## {name}",
            f"Instance of template {template_kind}",
            MD_HORIZONTAL_RULE,
            *_render_status(constraint_status(constraint)),
        ]
    )
