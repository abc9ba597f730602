"""Tests for ConstraintTemplate and constraint construction."""

from __future__ import annotations

import pytest

from gatekeeper_authoring.authoring.templates import (
    ADMISSION_TARGET,
    CONSTRAINT_API_VERSION,
    TEMPLATE_API_VERSION,
    TemplateError,
    build_constraint,
    build_constraint_template,
    current_enforcement_action,
    identifierfy,
    kindify,
    placeholder,
    rego_from_template,
    template_name_for,
    validate_constraint_name,
    with_enforcement_action,
)
from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.parser.loader import ResourceLoader
from tests.conftest import SAMPLE_CONSTRAINT_YAML, SAMPLE_REGO, SAMPLE_TEMPLATE_YAML


class TestNaming:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("allowed-repos", "allowedrepos"),
            ("K8s_Required.Labels", "k8srequiredlabels"),
            ("", ""),
        ],
    )
    def test_identifierfy(self, name: str, expected: str) -> None:
        assert identifierfy(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("allowed-repos", "AllowedRepos"),
            ("k8s_required_labels", "K8sRequiredLabels"),
            ("alreadyCamel", "AlreadyCamel"),
            ("a--b", "AB"),
            ("", ""),
        ],
    )
    def test_kindify(self, name: str, expected: str) -> None:
        assert kindify(name) == expected

    def test_template_name_for(self) -> None:
        assert template_name_for("/policies/allowed-repos.rego") == "allowedrepos"

    @pytest.mark.parametrize("name", ["ns-must-have-gk", "a", "v1.2-x"])
    def test_valid_constraint_names(self, name: str) -> None:
        assert validate_constraint_name(name) is None

    @pytest.mark.parametrize("name", ["", "1abc", "Upper", "has space", "-lead"])
    def test_invalid_constraint_names(self, name: str) -> None:
        message = validate_constraint_name(name)
        assert message is not None
        assert message.startswith("Name must begin with a letter")


class TestConstraintTemplate:
    def test_structure(self, registries_schema: SchemaDocument) -> None:
        template = build_constraint_template("allowed-repos", SAMPLE_REGO, registries_schema)
        assert template["apiVersion"] == TEMPLATE_API_VERSION
        assert template["kind"] == "ConstraintTemplate"
        assert template["metadata"] == {"name": "allowed-repos"}
        names = template["spec"]["crd"]["spec"]["names"]
        assert names == {
            "kind": "AllowedRepos",
            "listKind": "AllowedReposList",
            "plural": "allowedrepos",
            "singular": "allowedrepos",
        }
        assert template["spec"]["targets"] == [{"target": ADMISSION_TARGET, "rego": SAMPLE_REGO}]

    def test_schema_embedded(self, registries_schema: SchemaDocument) -> None:
        template = build_constraint_template("x", "package x", registries_schema)
        embedded = template["spec"]["crd"]["spec"]["validation"]["openAPIV3Schema"]
        assert embedded == registries_schema.to_json_dict()
        assert list(embedded["properties"]) == ["repos", "exemptNamespace"]

    def test_rego_round_trip(self, registries_schema: SchemaDocument) -> None:
        template = build_constraint_template("x", SAMPLE_REGO, registries_schema)
        assert rego_from_template(template) == SAMPLE_REGO

    def test_rego_missing(self) -> None:
        with pytest.raises(TemplateError, match="does not contain any Rego"):
            rego_from_template({"metadata": {"name": "t"}, "spec": {"targets": []}})


class TestPlaceholder:
    def test_plain(self) -> None:
        assert placeholder(3) == "${3}"

    def test_default(self) -> None:
        assert placeholder(1, default="my-constraint") == "${1:my-constraint}"

    def test_choices(self) -> None:
        assert placeholder(2, choices=["dryrun", "deny"]) == "${2|dryrun,deny|}"


class TestConstraint:
    def test_from_template(self, loader: ResourceLoader) -> None:
        template = loader.load_string(SAMPLE_TEMPLATE_YAML)
        constraint = build_constraint(template, "must-have-owner")
        assert constraint == {
            "apiVersion": CONSTRAINT_API_VERSION,
            "kind": "K8sRequiredLabels",
            "metadata": {"name": "${1:must-have-owner}"},
            "spec": {
                "enforcementAction": "${2|dryrun,deny|}",
                "match": {"kinds": []},
                "parameters": {"labels": ["${3}"], "owner": "${4}"},
            },
        }

    def test_template_without_schema_has_no_parameters(self) -> None:
        template = {"spec": {"crd": {"spec": {"names": {"kind": "Foo"}}}}}
        assert build_constraint(template, "c")["spec"]["parameters"] == {}

    def test_non_object_property_schemas_get_scalar_tab_stops(self) -> None:
        """Boolean or null property schemas have no ``type`` and are not wrapped in a list."""
        template = {
            "spec": {
                "crd": {
                    "spec": {
                        "names": {"kind": "Foo"},
                        "validation": {
                            "openAPIV3Schema": {
                                "properties": {"a": True, "b": None, "c": {"type": "array"}}
                            }
                        },
                    }
                }
            }
        }
        parameters = build_constraint(template, "c")["spec"]["parameters"]
        assert parameters == {"a": "${3}", "b": "${4}", "c": ["${5}"]}

    def test_template_without_crd_spec(self) -> None:
        with pytest.raises(TemplateError, match="custom resource spec"):
            build_constraint({"spec": {"crd": {}}}, "c")

    def test_template_without_kind(self) -> None:
        with pytest.raises(TemplateError, match="does not specify a kind"):
            build_constraint({"spec": {"crd": {"spec": {"names": {}}}}}, "c")

    def test_malformed_schema(self) -> None:
        template = {
            "spec": {
                "crd": {
                    "spec": {
                        "names": {"kind": "Foo"},
                        "validation": {"openAPIV3Schema": {"properties": "nope"}},
                    }
                }
            }
        }
        with pytest.raises(TemplateError, match="malformed"):
            build_constraint(template, "c")


class TestEnforcementAction:
    def test_current(self, loader: ResourceLoader) -> None:
        constraint = loader.load_string(SAMPLE_CONSTRAINT_YAML)
        assert current_enforcement_action(constraint) == "dryrun"

    def test_default_is_deny(self) -> None:
        assert current_enforcement_action({"spec": {}}) == "deny"
        assert current_enforcement_action({}) == "deny"

    def test_set_returns_copy(self, loader: ResourceLoader) -> None:
        constraint = loader.load_string(SAMPLE_CONSTRAINT_YAML)
        updated = with_enforcement_action(constraint, "deny")
        assert updated["spec"]["enforcementAction"] == "deny"
        assert constraint["spec"]["enforcementAction"] == "dryrun"
        assert updated["spec"]["parameters"] == constraint["spec"]["parameters"]

    def test_set_creates_spec(self) -> None:
        assert with_enforcement_action({}, "dryrun") == {"spec": {"enforcementAction": "dryrun"}}

    def test_unknown_action(self) -> None:
        with pytest.raises(ValueError, match="Unknown enforcement action"):
            with_enforcement_action({}, "warn")
