from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from workload_converter.builders.manifest import form_data_to_yaml
from workload_converter.models.descriptor import WorkloadDescriptor
from workload_converter.models.kinds import REPLICATED_KINDS, SUPPORTED_WORKLOAD_KINDS
from workload_converter.parsers.yaml_parser import yaml_to_form_data


FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def _form() -> WorkloadDescriptor:
    data = json.loads((FIXTURES / "form_deployment.json").read_text(encoding="utf-8"))
    return WorkloadDescriptor.model_validate(data)


@pytest.mark.parametrize("kind", SUPPORTED_WORKLOAD_KINDS)
def test_identity_fields_survive_round_trip(kind):
    original = WorkloadDescriptor.model_validate(
        {
            "name": "svc",
            "namespace": "apps",
            "replicas": 4,
            "schedule": "15 * * * *",
            "containers": [{"name": "worker", "image": "busybox:1.36"}],
        }
    )
    back = yaml_to_form_data(form_data_to_yaml(kind, original))

    assert back.name == "svc"
    assert back.namespace == "apps"
    assert back.containers[0].name == "worker"
    assert back.containers[0].image == "busybox:1.36"
    if kind in REPLICATED_KINDS:
        assert back.replicas == 4
    else:
        assert back.replicas is None
    if kind == "CronJob":
        assert back.schedule == "15 * * * *"


def test_form_fixture_round_trip():
    text = form_data_to_yaml("Deployment", _form())
    doc = yaml.safe_load(text)

    assert doc["metadata"]["labels"] == {"app": "api"}
    assert doc["spec"]["selector"]["matchLabels"] == doc["metadata"]["labels"]
    assert doc["metadata"]["annotations"] == {"description": "public API", "team": "core"}

    container = doc["spec"]["template"]["spec"]["containers"][0]
    assert container["command"] == ["/bin/sh", "-c", "echo hi"]
    assert container["livenessProbe"] == {"httpGet": {"path": "/healthz", "port": 8080}}
    assert "readinessProbe" not in container

    assert doc["spec"]["template"]["spec"]["volumes"] == [{"name": "scratch", "emptyDir": {}}]
    terms = doc["spec"]["template"]["spec"]["affinity"]["nodeAffinity"][
        "requiredDuringSchedulingIgnoredDuringExecution"
    ]["nodeSelectorTerms"]
    assert terms == [{"matchExpressions": [{"key": "disktype", "operator": "In", "values": ["ssd", "nvme"]}]}]

    back = yaml_to_form_data(text)
    assert back.description == "public API"
    assert [(a.key, a.value) for a in back.annotations] == [("team", "core")]
    c = back.containers[0]
    assert c.command == "/bin/sh\n-c\necho hi"
    assert c.liveness_probe.type == "httpGet"
    assert c.liveness_probe.exec is None
    assert c.readiness_probe is None
    vol = back.volumes[0]
    assert vol.type == "emptyDir"
    assert vol.host_path is None
    assert back.scheduling.node_affinity_required[0].values == "ssd,nvme"


def test_round_trip_is_stable_after_first_pass():
    first = form_data_to_yaml("StatefulSet", _form())
    second = form_data_to_yaml("StatefulSet", yaml_to_form_data(first))
    assert first == second


def test_manifest_fixture_round_trip_keeps_structure():
    text = (FIXTURES / "deployment.yaml").read_text(encoding="utf-8")
    original = yaml.safe_load(text)
    regenerated = yaml.safe_load(form_data_to_yaml("Deployment", yaml_to_form_data(text)))

    assert regenerated["metadata"] == original["metadata"]
    assert regenerated["spec"]["replicas"] == 3
    assert regenerated["spec"]["strategy"] == original["spec"]["strategy"]
    pod = regenerated["spec"]["template"]["spec"]
    original_pod = original["spec"]["template"]["spec"]
    assert pod["affinity"] == original_pod["affinity"]
    assert pod["volumes"] == original_pod["volumes"]
    assert pod["tolerations"] == original_pod["tolerations"]
    assert pod["containers"][0]["env"] == original_pod["containers"][0]["env"]
    assert pod["containers"][0]["startupProbe"] == original_pod["containers"][0]["startupProbe"]
