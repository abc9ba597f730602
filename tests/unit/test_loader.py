"""Tests for resource YAML loading, its safety limits, and dumping."""

from __future__ import annotations

from pathlib import Path

import pytest

from gatekeeper_authoring.parser.loader import (
    _MAX_DOCUMENT_SIZE,
    ResourceFormatError,
    ResourceLoader,
    YAMLSafetyError,
    dump_yaml,
)
from tests.conftest import SAMPLE_CONSTRAINT_YAML, SAMPLE_REGO, SAMPLE_TEMPLATE_YAML


class TestAnchorRejection:
    """Gatekeeper resources never need anchors/aliases."""

    def test_billion_laughs_rejected(self, loader: ResourceLoader) -> None:
        """Recursive anchor expansion is refused before parsing."""
        yaml = (
            "a: &a ['lol','lol','lol','lol','lol']\n"
            "b: &b [*a,*a,*a,*a,*a]\n"
            "c: &c [*b,*b,*b,*b,*b]\n"
        )
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_anchor_in_sequence(self, loader: ResourceLoader) -> None:
        yaml = "items:\n  - &item1 foo\n  - *item1\n"
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_ampersand_in_comment_not_rejected(self, loader: ResourceLoader) -> None:
        """An ``&`` inside a comment must not look like an anchor."""
        yaml = "# see R&D notes\nkey: value\n"
        assert loader.load_string(yaml) == {"key": "value"}


class TestLimits:
    def test_oversized_document_rejected(self, loader: ResourceLoader) -> None:
        yaml = "key: " + "x" * (_MAX_DOCUMENT_SIZE + 1) + "\n"
        with pytest.raises(YAMLSafetyError, match="maximum size"):
            loader.load_string(yaml)

    def test_excessive_node_count_rejected(self, loader: ResourceLoader) -> None:
        yaml = "\n".join(f"k{i}: v{i}" for i in range(50_001))
        with pytest.raises(YAMLSafetyError, match="node count"):
            loader.load_string(yaml)


class TestResourceShape:
    def test_empty_document(self, loader: ResourceLoader) -> None:
        with pytest.raises(ResourceFormatError, match="empty"):
            loader.load_string("")

    @pytest.mark.parametrize("yaml", ["- a\n- b\n", "just a string\n"])
    def test_non_mapping(self, loader: ResourceLoader, yaml: str) -> None:
        with pytest.raises(ResourceFormatError, match="mapping"):
            loader.load_string(yaml)

    def test_invalid_yaml(self, loader: ResourceLoader) -> None:
        with pytest.raises(ResourceFormatError, match="Invalid YAML"):
            loader.load_string("key: [unclosed\n")

    def test_plain_values(self, loader: ResourceLoader) -> None:
        """ruamel containers are converted to plain dicts, lists and strings."""
        template = loader.load_string(SAMPLE_TEMPLATE_YAML)
        assert type(template) is dict
        assert type(template["spec"]["targets"]) is list
        rego = template["spec"]["targets"][0]["rego"]
        assert type(rego) is str
        assert rego.startswith("package k8srequiredlabels\n")

    def test_load_file(self, loader: ResourceLoader, tmp_path: Path) -> None:
        path = tmp_path / "constraint.yaml"
        path.write_text(SAMPLE_CONSTRAINT_YAML, encoding="utf-8")
        constraint = loader.load(path)
        assert constraint["metadata"]["name"] == "ns-must-have-gk"
        assert len(constraint["status"]["violations"]) == 2


class TestDumpYaml:
    def test_multiline_string_as_literal_block(self, loader: ResourceLoader) -> None:
        """Rego keeps its line breaks as a ``|`` block and loads back unchanged."""
        rendered = dump_yaml({"rego": SAMPLE_REGO, "name": "x"})
        assert "rego: |" in rendered
        assert "  package k8sallowedrepos\n" in rendered
        assert loader.load_string(rendered) == {"rego": SAMPLE_REGO, "name": "x"}

    def test_block_style_and_key_order(self) -> None:
        rendered = dump_yaml({"b": {"c": [1, 2]}, "a": 1})
        assert rendered == "b:\n  c:\n    - 1\n    - 2\na: 1\n"

    def test_template_loads_back(self, loader: ResourceLoader) -> None:
        template = loader.load_string(SAMPLE_TEMPLATE_YAML)
        assert loader.load_string(dump_yaml(template)) == template
