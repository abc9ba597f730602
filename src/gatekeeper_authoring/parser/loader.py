"""YAML loading and dumping for Gatekeeper resources (templates, constraints)."""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import LiteralScalarString

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 20

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate potentially malicious input
    (e.g., billion-laughs anchors, excessive nesting, oversized documents).
    """


class ResourceFormatError(Exception):
    """Raised when a YAML document is not a single resource mapping."""


class ResourceLoader:
    """Loads Kubernetes resource YAML into plain dicts.

    Uses ruamel.yaml so that documents produced by kubectl and by
    :func:`dump_yaml` load back identically.
    """

    def __init__(self) -> None:
        self._yaml = YAML()
        # Reject deeply nested structures (mitigates stack-based DoS).
        self._yaml.max_depth = _MAX_DEPTH

    # -- safety checks -------------------------------------------------------

    @staticmethod
    def _check_yaml_safety(content: str) -> None:
        """Pre-parse safety checks on raw YAML text.

        Raises ``YAMLSafetyError`` if the content contains anchors/aliases
        or exceeds the maximum document size.
        """
        if len(content) > _MAX_DOCUMENT_SIZE:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {_MAX_DOCUMENT_SIZE:,} limit)"
            )
        if _ANCHOR_RE.search(content):
            raise YAMLSafetyError("YAML anchors/aliases are not supported in resources")

    @staticmethod
    def _check_node_count(data: Any, limit: int = _MAX_NODE_COUNT) -> None:
        """Post-parse defense-in-depth: reject documents with too many nodes."""
        count = 0
        stack: list[Any] = [data]
        while stack:
            node = stack.pop()
            count += 1
            if count > limit:
                raise YAMLSafetyError(f"YAML document exceeds maximum node count ({limit:,})")
            if isinstance(node, dict):
                stack.extend(node.values())
            elif isinstance(node, list):
                stack.extend(node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> dict[str, Any]:
        """Load a resource YAML file."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content)

    def load_string(self, content: str) -> dict[str, Any]:
        """Load a resource from a YAML string.

        Raises ``ResourceFormatError`` when the document is empty or its top
        level is not a mapping.
        """
        self._check_yaml_safety(content)
        try:
            data = self._yaml.load(content)
        except YAMLError as exc:
            raise ResourceFormatError(f"Invalid YAML: {exc}") from exc
        if data is None:
            raise ResourceFormatError("YAML document is empty")
        if not isinstance(data, dict):
            raise ResourceFormatError("YAML document must be a mapping, not a list or scalar")
        self._check_node_count(data)
        return self._to_plain_value(data)

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml CommentedMap/Seq to plain Python dict/list."""
        if isinstance(data, (CommentedMap, dict)):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, (CommentedSeq, list)):
            return [self._to_plain_value(item) for item in data]
        if isinstance(data, str):
            return str(data)
        return data


def _prepare_for_dump(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _prepare_for_dump(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_prepare_for_dump(item) for item in data]
    if isinstance(data, str) and "\n" in data:
        return LiteralScalarString(data)
    return data


def dump_yaml(resource: dict[str, Any]) -> str:
    """Render a resource as block-style YAML; multi-line strings become ``|`` blocks."""
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.indent(mapping=2, sequence=4, offset=2)
    stream = io.StringIO()
    yaml.dump(_prepare_for_dump(resource), stream)
    return stream.getvalue()
