"""Schema association, schema synthesis and Gatekeeper resource authoring."""

from gatekeeper_authoring.authoring.associations import (
    SchemaLookup,
    SchemaLookupStatus,
    SchemaParseError,
    associated_schema,
    associated_schema_path,
    lookup_schema,
    parse_schema,
)
from gatekeeper_authoring.authoring.synthesizer import empty_schema, schema_json, synthesize_schema
from gatekeeper_authoring.authoring.templates import (
    TemplateError,
    build_constraint,
    build_constraint_template,
    rego_from_template,
    with_enforcement_action,
)

__all__ = [
    "SchemaLookup",
    "SchemaLookupStatus",
    "SchemaParseError",
    "TemplateError",
    "associated_schema",
    "associated_schema_path",
    "build_constraint",
    "build_constraint_template",
    "empty_schema",
    "lookup_schema",
    "parse_schema",
    "rego_from_template",
    "schema_json",
    "synthesize_schema",
    "with_enforcement_action",
]
