"""Locating and loading the parameters schema that sits next to a Rego file.

The relationship is by file name: ``foo.rego`` is described by
``foo.schema.json`` in the same directory.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import ValidationError

from gatekeeper_authoring.models.schema import SchemaDocument

logger = logging.getLogger("gatekeeper_authoring.authoring")

SCHEMA_EXTENSION = "schema.json"


class SchemaParseError(Exception):
    """Raised when schema text is not a JSON object shaped like a schema."""


class SchemaLookupStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class SchemaLookup:
    """Outcome of looking for a source file's schema.

    Callers that only lint use :meth:`or_none`; authoring flows can tell a
    missing schema from a broken one.
    """

    path: Path
    status: SchemaLookupStatus
    document: SchemaDocument | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status is SchemaLookupStatus.FOUND

    def or_none(self) -> SchemaDocument | None:
        return self.document if self.found else None


def associated_schema_path(source_path: str | Path) -> Path:
    """Path where *source_path*'s schema lives, whether or not it exists.

    The final extension is replaced, a bare trailing dot included
    (``foo.`` -> ``foo.schema.json``). A leading dot does not start an
    extension (``.rego`` -> ``.rego.schema.json``).
    """
    path = Path(source_path)
    dot = path.name.rfind(".")
    base = path.name[:dot] if dot > 0 else path.name
    return path.with_name(f"{base}.{SCHEMA_EXTENSION}")


def parse_schema(text: str) -> SchemaDocument:
    """Parse JSON schema text. Raises ``SchemaParseError`` on any defect."""
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise SchemaParseError(f"Schema is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise SchemaParseError("Schema must be a JSON object")
    try:
        return SchemaDocument.model_validate(raw)
    except ValidationError as exc:
        raise SchemaParseError(f"Schema has an unexpected shape: {exc}") from exc


def lookup_schema(source_path: str | Path) -> SchemaLookup:
    """Find and parse the schema associated with *source_path*. Never raises."""
    schema_path = associated_schema_path(source_path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return SchemaLookup(path=schema_path, status=SchemaLookupStatus.NOT_FOUND)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read schema %s: %s", schema_path, exc)
        return SchemaLookup(path=schema_path, status=SchemaLookupStatus.PARSE_ERROR, error=str(exc))

    try:
        document = parse_schema(text)
    except SchemaParseError as exc:
        logger.debug("Ignoring unparseable schema %s: %s", schema_path, exc)
        return SchemaLookup(path=schema_path, status=SchemaLookupStatus.PARSE_ERROR, error=str(exc))
    return SchemaLookup(path=schema_path, status=SchemaLookupStatus.FOUND, document=document)


def associated_schema(source_path: str | Path) -> SchemaDocument | None:
    """The parsed schema for *source_path*, or ``None`` if missing or broken."""
    return lookup_schema(source_path).or_none()
