from __future__ import annotations

import pytest
import yaml

from workload_converter.builders.manifest import build_manifest, form_data_to_yaml
from workload_converter.core.exceptions import UnsupportedKindError
from workload_converter.models.descriptor import ContainerSpec, WorkloadDescriptor


def _descriptor(**kwargs) -> WorkloadDescriptor:
    base = {"name": "foo", "containers": [ContainerSpec(name="app", image="busybox")]}
    base.update(kwargs)
    return WorkloadDescriptor(**base)


def test_defaults_when_fields_are_empty():
    doc = build_manifest("Deployment", WorkloadDescriptor())
    assert doc["metadata"]["name"] == "example"
    assert doc["metadata"]["namespace"] == "default"
    assert doc["metadata"]["labels"] == {"app": "example"}
    assert doc["spec"]["replicas"] == 1


def test_labels_default_to_app_name():
    doc = yaml.safe_load(form_data_to_yaml("Deployment", _descriptor()))
    assert doc["metadata"]["labels"] == {"app": "foo"}
    assert doc["spec"]["selector"]["matchLabels"] == {"app": "foo"}
    assert doc["spec"]["template"]["metadata"]["labels"] == {"app": "foo"}


def test_labels_are_independent_copies_and_no_aliases():
    d = _descriptor(labels=[{"key": "app", "value": "foo"}, {"key": "tier", "value": "web"}])
    doc = build_manifest("Deployment", d)
    labels = doc["metadata"]["labels"]
    selector = doc["spec"]["selector"]["matchLabels"]
    assert labels == selector
    assert labels is not selector
    assert labels is not doc["spec"]["template"]["metadata"]["labels"]

    text = form_data_to_yaml("Deployment", d)
    assert "&id" not in text
    assert "*id" not in text


def test_description_merges_into_annotations():
    d = _descriptor(description="my app", annotations=[{"key": "team", "value": "core"}, {"key": "x", "value": ""}])
    doc = build_manifest("Deployment", d)
    assert doc["metadata"]["annotations"] == {"description": "my app", "team": "core"}


def test_no_annotations_key_when_empty():
    assert "annotations" not in build_manifest("Deployment", _descriptor())["metadata"]


def test_long_lines_are_not_wrapped():
    long_value = " ".join(["word"] * 60)
    text = form_data_to_yaml("Deployment", _descriptor(description=long_value))
    assert f"description: {long_value}\n" in text


def test_deployment_strategy_and_extras():
    d = _descriptor(
        strategy={"type": "RollingUpdate", "rollingUpdate": {"maxSurge": "25%", "maxUnavailable": 0}},
        minReadySeconds=5,
        revisionHistoryLimit=3,
    )
    spec = build_manifest("Deployment", d)["spec"]
    assert spec["strategy"] == {"type": "RollingUpdate", "rollingUpdate": {"maxSurge": "25%", "maxUnavailable": 0}}
    assert spec["minReadySeconds"] == 5
    assert spec["revisionHistoryLimit"] == 3

    recreate = build_manifest(
        "Deployment", _descriptor(strategy={"type": "Recreate", "rollingUpdate": {"maxSurge": 1}})
    )["spec"]
    assert recreate["strategy"] == {"type": "Recreate"}


def test_statefulset_service_name_defaults_to_name():
    doc = build_manifest("StatefulSet", _descriptor(replicas=3))
    assert doc["apiVersion"] == "apps/v1"
    assert doc["spec"]["serviceName"] == "foo"
    assert doc["spec"]["replicas"] == 3


def test_daemonset_has_no_replicas():
    doc = build_manifest("DaemonSet", _descriptor(replicas=4))
    assert "replicas" not in doc["spec"]
    assert doc["spec"]["selector"]["matchLabels"] == {"app": "foo"}


def test_job_forces_restart_policy_never():
    doc = build_manifest("Job", _descriptor(completions=3, parallelism=2, backoffLimit=1))
    assert doc["apiVersion"] == "batch/v1"
    pod = doc["spec"]["template"]["spec"]
    assert pod["restartPolicy"] == "Never"
    assert doc["spec"]["completions"] == 3
    assert doc["spec"]["parallelism"] == 2
    assert doc["spec"]["backoffLimit"] == 1
    assert "selector" not in doc["spec"]


def test_cronjob_nests_job_template():
    doc = build_manifest("CronJob", _descriptor(schedule="*/5 * * * *", suspend=True, backoffLimit=4))
    spec = doc["spec"]
    assert spec["schedule"] == "*/5 * * * *"
    assert spec["suspend"] is True
    job = spec["jobTemplate"]["spec"]
    assert job["backoffLimit"] == 4
    assert job["template"]["spec"]["restartPolicy"] == "Never"
    assert job["template"]["spec"]["containers"][0]["image"] == "busybox"


def test_cronjob_default_schedule():
    assert build_manifest("CronJob", _descriptor())["spec"]["schedule"] == "0 0 * * *"


def test_rollout_uses_canary_strategy():
    d = _descriptor(strategy={"type": "RollingUpdate", "rollingUpdate": {"maxSurge": 1, "maxUnavailable": "10%"}})
    doc = build_manifest("Rollout", d)
    assert doc["apiVersion"] == "argoproj.io/v1alpha1"
    assert doc["spec"]["strategy"] == {"canary": {"maxUnavailable": "10%", "maxSurge": 1}}


def test_pod_spec_extras():
    d = _descriptor(
        nodeSelector=[{"key": "disk", "value": "ssd"}],
        imagePullSecrets=["regcred"],
        dnsPolicy="None",
        dnsConfig={"nameservers": "10.0.0.10", "searches": "svc.cluster.local"},
        hostNetwork=False,
        terminationGracePeriodSeconds=0,
        tolerations=[{"operator": "Exists"}],
        initContainers=[{"name": "init", "image": "busybox", "command": "true"}],
    )
    pod = build_manifest("Deployment", d)["spec"]["template"]["spec"]
    assert pod["nodeSelector"] == {"disk": "ssd"}
    assert pod["imagePullSecrets"] == [{"name": "regcred"}]
    assert pod["dnsPolicy"] == "None"
    assert pod["dnsConfig"] == {"nameservers": ["10.0.0.10"], "searches": ["svc.cluster.local"]}
    assert "hostNetwork" not in pod
    assert pod["terminationGracePeriodSeconds"] == 0
    assert pod["tolerations"] == [{"operator": "Exists"}]
    assert pod["initContainers"][0]["command"] == ["true"]


def test_kind_is_case_insensitive_and_validated():
    assert build_manifest("cronjob", _descriptor())["kind"] == "CronJob"
    with pytest.raises(UnsupportedKindError):
        build_manifest("ReplicaSet", _descriptor())
