from __future__ import annotations

import logging
from typing import Any, Dict

import yaml

from workload_converter.builders.container import build_container
from workload_converter.builders.scheduling import (
    build_affinity,
    build_dns_config,
    build_node_selector,
    build_tolerations,
)
from workload_converter.builders.volume import build_volume
from workload_converter.models.descriptor import WorkloadDescriptor
from workload_converter.models.kinds import API_VERSIONS, normalize_kind
from workload_converter.utils.text import pairs_to_map


logger = logging.getLogger(__name__)

DEFAULT_NAME = "example"
DEFAULT_NAMESPACE = "default"
DEFAULT_REPLICAS = 1
DEFAULT_SCHEDULE = "0 0 * * *"


class _NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors or aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def dump_yaml(data: Any) -> str:
    return yaml.dump(
        data,
        Dumper=_NoAliasDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=float("inf"),
    )


def form_data_to_yaml(kind: str, descriptor: WorkloadDescriptor) -> str:
    """Render a form descriptor as a Kubernetes manifest in YAML."""
    return dump_yaml(build_manifest(kind, descriptor))


def build_manifest(kind: str, descriptor: WorkloadDescriptor) -> Dict[str, Any]:
    kind = normalize_kind(kind)
    d = descriptor
    name = d.name or DEFAULT_NAME

    labels = pairs_to_map(d.labels)
    if not labels:
        labels = {"app": name}

    annotations: Dict[str, str] = {}
    if d.description:
        annotations["description"] = d.description
    annotations.update(pairs_to_map(d.annotations))

    metadata: Dict[str, Any] = {
        "name": name,
        "namespace": d.namespace or DEFAULT_NAMESPACE,
        "labels": dict(labels),
    }
    if annotations:
        metadata["annotations"] = annotations

    pod_spec = build_pod_spec(d)

    if kind == "Deployment":
        spec: Dict[str, Any] = _replicated_spec(d, labels, pod_spec)
        if d.strategy is not None:
            strategy: Dict[str, Any] = {"type": d.strategy.type}
            if d.strategy.type == "RollingUpdate" and d.strategy.rolling_update is not None:
                rolling = _rolling_update(d)
                if rolling:
                    strategy["rollingUpdate"] = rolling
            spec["strategy"] = strategy
        _copy_optional(
            spec,
            d,
            ("min_ready_seconds", "minReadySeconds"),
            ("revision_history_limit", "revisionHistoryLimit"),
            ("progress_deadline_seconds", "progressDeadlineSeconds"),
        )
    elif kind == "StatefulSet":
        spec = {
            "replicas": _replicas(d),
            "serviceName": d.service_name or name,
            "selector": {"matchLabels": dict(labels)},
            "template": _pod_template(labels, pod_spec),
        }
        if d.pod_management_policy:
            spec["podManagementPolicy"] = d.pod_management_policy
    elif kind == "DaemonSet":
        spec = {
            "selector": {"matchLabels": dict(labels)},
            "template": _pod_template(labels, pod_spec),
        }
    elif kind == "Job":
        spec = {"template": _pod_template(labels, _batch_pod_spec(pod_spec))}
        _copy_job_fields(spec, d)
    elif kind == "CronJob":
        spec = {"schedule": d.schedule or DEFAULT_SCHEDULE}
        _copy_optional(
            spec,
            d,
            ("suspend", "suspend"),
            ("concurrency_policy", "concurrencyPolicy"),
            ("successful_jobs_history_limit", "successfulJobsHistoryLimit"),
            ("failed_jobs_history_limit", "failedJobsHistoryLimit"),
        )
        job_spec: Dict[str, Any] = {"template": _pod_template(labels, _batch_pod_spec(pod_spec))}
        _copy_job_fields(job_spec, d)
        spec["jobTemplate"] = {"spec": job_spec}
    else:  # Rollout
        spec = _replicated_spec(d, labels, pod_spec)
        if d.strategy is not None:
            spec["strategy"] = {"canary": _rolling_update(d)}

    logger.debug("Built %s manifest for %s/%s", kind, metadata["namespace"], name)
    return {
        "apiVersion": API_VERSIONS[kind],
        "kind": kind,
        "metadata": metadata,
        "spec": spec,
    }


def build_pod_spec(d: WorkloadDescriptor) -> Dict[str, Any]:
    pod: Dict[str, Any] = {"containers": [build_container(c) for c in d.containers]}

    if d.init_containers:
        pod["initContainers"] = [build_container(c) for c in d.init_containers]
    if d.volumes:
        pod["volumes"] = [build_volume(v) for v in d.volumes]

    affinity = build_affinity(d.scheduling)
    if affinity:
        pod["affinity"] = affinity
    node_selector = build_node_selector(d.node_selector)
    if node_selector:
        pod["nodeSelector"] = node_selector
    tolerations = build_tolerations(d.tolerations)
    if tolerations:
        pod["tolerations"] = tolerations

    if d.dns_policy:
        pod["dnsPolicy"] = d.dns_policy
    dns_config = build_dns_config(d.dns_config)
    if dns_config:
        pod["dnsConfig"] = dns_config
    if d.termination_grace_period_seconds is not None:
        pod["terminationGracePeriodSeconds"] = d.termination_grace_period_seconds
    if d.host_network:
        pod["hostNetwork"] = True
    if d.image_pull_secrets:
        pod["imagePullSecrets"] = [{"name": s} for s in d.image_pull_secrets if s]
    return pod


def _replicas(d: WorkloadDescriptor) -> int:
    return d.replicas if d.replicas is not None else DEFAULT_REPLICAS


def _pod_template(labels: Dict[str, str], pod_spec: Dict[str, Any]) -> Dict[str, Any]:
    return {"metadata": {"labels": dict(labels)}, "spec": pod_spec}


def _replicated_spec(
    d: WorkloadDescriptor, labels: Dict[str, str], pod_spec: Dict[str, Any]
) -> Dict[str, Any]:
    return {
        "replicas": _replicas(d),
        "selector": {"matchLabels": dict(labels)},
        "template": _pod_template(labels, pod_spec),
    }


def _batch_pod_spec(pod_spec: Dict[str, Any]) -> Dict[str, Any]:
    return {**pod_spec, "restartPolicy": "Never"}


def _rolling_update(d: WorkloadDescriptor) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    ru = d.strategy.rolling_update if d.strategy else None
    if ru is None:
        return out
    if ru.max_unavailable is not None and ru.max_unavailable != "":
        out["maxUnavailable"] = ru.max_unavailable
    if ru.max_surge is not None and ru.max_surge != "":
        out["maxSurge"] = ru.max_surge
    return out


def _copy_job_fields(spec: Dict[str, Any], d: WorkloadDescriptor) -> None:
    _copy_optional(
        spec,
        d,
        ("completions", "completions"),
        ("parallelism", "parallelism"),
        ("backoff_limit", "backoffLimit"),
        ("active_deadline_seconds", "activeDeadlineSeconds"),
        ("ttl_seconds_after_finished", "ttlSecondsAfterFinished"),
    )


def _copy_optional(spec: Dict[str, Any], d: WorkloadDescriptor, *fields) -> None:
    for attr, key in fields:
        value = getattr(d, attr)
        if value is not None:
            spec[key] = value
