"""Shared test fixtures for Gatekeeper authoring."""

from __future__ import annotations

from pathlib import Path

import pytest

from gatekeeper_authoring.models.schema import SchemaDocument
from gatekeeper_authoring.parser.loader import ResourceLoader
from gatekeeper_authoring.service.workspace import PolicyWorkspace


@pytest.fixture
def loader() -> ResourceLoader:
    return ResourceLoader()


@pytest.fixture
def workspace() -> PolicyWorkspace:
    return PolicyWorkspace()


@pytest.fixture
def registries_schema() -> SchemaDocument:
    """Schema declaring the parameters used by SAMPLE_REGO."""
    return SchemaDocument.model_validate(SAMPLE_SCHEMA)


@pytest.fixture
def policy_dir(tmp_path: Path) -> Path:
    """A directory with ``allowed-repos.rego`` and its ``allowed-repos.schema.json``."""
    (tmp_path / "allowed-repos.rego").write_text(SAMPLE_REGO, encoding="utf-8")
    (tmp_path / "allowed-repos.schema.json").write_text(SAMPLE_SCHEMA_JSON, encoding="utf-8")
    return tmp_path


SAMPLE_REGO = """\
package k8sallowedrepos

violation[{"msg": msg}] {
  container := input.review.object.spec.containers[_]
  satisfied := [good | repo = input.parameters.repos[_] ; good = startswith(container.image, repo)]
  not any(satisfied)
  msg := sprintf("container <%v> has an invalid image repo <%v>, allowed repos are %v", [container.name, container.image, input.parameters.repos])
}

violation[{"msg": msg}] {
  input.parameters.exemptNamespace != input.review.object.metadata.namespace
  msg := "namespace is not exempt"
}
"""

SAMPLE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema",
    "properties": {
        "repos": {"type": "array", "items": {"type": "string"}},
        "exemptNamespace": {"type": "string"},
    },
}

SAMPLE_SCHEMA_JSON = """\
{
  "$schema": "http://json-schema.org/draft-07/schema",
  "properties": {
    "repos": {
      "type": "array",
      "items": {
        "type": "string"
      }
    },
    "exemptNamespace": {
      "type": "string"
    }
  }
}
"""

SAMPLE_TEMPLATE_YAML = """\
apiVersion: templates.gatekeeper.sh/v1beta1
kind: ConstraintTemplate
metadata:
  name: k8srequiredlabels
spec:
  crd:
    spec:
      names:
        kind: K8sRequiredLabels
        listKind: K8sRequiredLabelsList
        plural: k8srequiredlabels
        singular: k8srequiredlabels
      validation:
        openAPIV3Schema:
          properties:
            labels:
              type: array
              items:
                type: string
            owner:
              type: string
  targets:
    - target: admission.k8s.gatekeeper.sh
      rego: |
        package k8srequiredlabels

        violation[{"msg": msg}] {
          provided := {label | input.review.object.metadata.labels[label]}
          required := {label | label := input.parameters.labels[_]}
          missing := required - provided
          count(missing) > 0
          msg := sprintf("you must provide labels: %v", [missing])
        }
"""

SAMPLE_CONSTRAINT_YAML = """\
apiVersion: constraints.gatekeeper.sh/v1beta1
kind: K8sRequiredLabels
metadata:
  name: ns-must-have-gk
spec:
  enforcementAction: dryrun
  match:
    kinds:
      - apiGroups: [""]
        kinds: ["Namespace"]
  parameters:
    labels: ["gatekeeper"]
status:
  auditTimestamp: "2020-03-04T10:15:30Z"
  totalViolations: 2
  violations:
    - enforcementAction: dryrun
      kind: Namespace
      message: 'you must provide labels: {"gatekeeper"}'
      name: default
    - enforcementAction: dryrun
      kind: Namespace
      message: 'you must provide labels: {"gatekeeper"}'
      name: kube-system
"""
