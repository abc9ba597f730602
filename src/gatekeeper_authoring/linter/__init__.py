"""Linters for Rego policy source."""

from gatekeeper_authoring.linter.base import Linter, fixes_all, lint_all
from gatekeeper_authoring.linter.undefined_parameters import (
    DIAGNOSTIC_NO_DEFINITION,
    MAX_FIX_DISTANCE,
    MAX_FIX_SUGGESTIONS,
    UNDEFINED_PARAMETERS_LINTER,
    UndefinedParametersLinter,
    lint,
    propose_fixes,
)

LINTERS: tuple[Linter, ...] = (UNDEFINED_PARAMETERS_LINTER,)

__all__ = [
    "DIAGNOSTIC_NO_DEFINITION",
    "LINTERS",
    "MAX_FIX_DISTANCE",
    "MAX_FIX_SUGGESTIONS",
    "UNDEFINED_PARAMETERS_LINTER",
    "Linter",
    "UndefinedParametersLinter",
    "fixes_all",
    "lint",
    "lint_all",
    "propose_fixes",
]
