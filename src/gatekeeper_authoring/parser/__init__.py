"""Policy source scanning and resource YAML handling."""

from gatekeeper_authoring.parser.extractor import (
    PARAMETER_REF_PATTERN,
    ParameterReference,
    extract_parameter_references,
)
from gatekeeper_authoring.parser.loader import (
    ResourceFormatError,
    ResourceLoader,
    YAMLSafetyError,
    dump_yaml,
)
from gatekeeper_authoring.parser.source import SourceText

__all__ = [
    "PARAMETER_REF_PATTERN",
    "ParameterReference",
    "ResourceFormatError",
    "ResourceLoader",
    "SourceText",
    "YAMLSafetyError",
    "dump_yaml",
    "extract_parameter_references",
]
