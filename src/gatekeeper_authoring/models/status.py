"""Audit status of a deployed constraint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ConstraintViolation(BaseModel):
    """One resource found in violation of a constraint by the audit."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: str = ""
    name: str = ""
    namespace: str | None = None
    message: str = ""
    enforcement_action: str | None = Field(default=None, alias="enforcementAction")


class ConstraintStatus(BaseModel):
    """The ``status`` block Gatekeeper's audit writes onto a constraint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    audit_timestamp: datetime | None = Field(default=None, alias="auditTimestamp")
    total_violations: int | None = Field(default=None, alias="totalViolations")
    violations: list[ConstraintViolation] = []
