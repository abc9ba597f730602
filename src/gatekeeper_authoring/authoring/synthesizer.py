"""Builds a starting parameters schema from the references a Rego file makes."""

from __future__ import annotations

from gatekeeper_authoring.models.schema import JSON_SCHEMA_DRAFT_07, SchemaDocument
from gatekeeper_authoring.parser.extractor import extract_parameter_references


def synthesize_schema(text: str) -> SchemaDocument:
    """Declare one property per distinct parameter referenced in *text*.

    Indexed references (``input.parameters.tags[_]``) become string arrays,
    everything else a string. When a name is used both ways, whichever use
    comes first decides.
    """
    properties: dict[str, SchemaDocument | bool | None] = {}
    for reference in extract_parameter_references(text):
        if reference.name in properties:
            continue
        if reference.is_array:
            properties[reference.name] = SchemaDocument.array_of(SchemaDocument.string())
        else:
            properties[reference.name] = SchemaDocument.string()
    return SchemaDocument(schema_uri=JSON_SCHEMA_DRAFT_07, properties=properties)


def empty_schema() -> SchemaDocument:
    return SchemaDocument(schema_uri=JSON_SCHEMA_DRAFT_07, properties={})


def schema_json(document: SchemaDocument) -> str:
    """Serialise a schema the way it is written to ``*.schema.json`` files."""
    return document.to_json(indent=2) + "\n"
