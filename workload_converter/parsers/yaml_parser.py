from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import yaml

from workload_converter.core.exceptions import ManifestParseError
from workload_converter.models.descriptor import (
    KeyValue,
    RollingUpdateSpec,
    UpdateStrategySpec,
    WorkloadDescriptor,
)
from workload_converter.models.kinds import SUPPORTED_WORKLOAD_KINDS
from workload_converter.parsers.container import read_container, read_init_container, read_volume
from workload_converter.parsers.scheduling import (
    read_dns_config,
    read_scheduling,
    read_tolerations,
)
from workload_converter.utils.coerce import (
    bool_or_none,
    ensure_dict,
    ensure_list,
    int_or_none,
    str_or_none,
    validate_or_none,
)


logger = logging.getLogger(__name__)


def load_manifest(text: str) -> Dict[str, Any]:
    """Parse a single manifest document, raising ManifestParseError on failure."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestParseError(format_yaml_error(e)) from e
    if not isinstance(doc, dict):
        raise ManifestParseError("Manifest must be a YAML mapping")
    return doc


def yaml_error_message(text: str) -> Optional[str]:
    """Return a display message for a YAML syntax error in ``text``, or None."""
    try:
        yaml.safe_load(text)
    except yaml.YAMLError as e:
        return format_yaml_error(e)
    return None


def yaml_to_form_data(text: str) -> Optional[WorkloadDescriptor]:
    """Convert manifest YAML into a form descriptor.

    Returns None when the text is not valid YAML or is not a mapping; this
    function never raises for bad input.
    """
    try:
        doc = load_manifest(text)
    except ManifestParseError as e:
        logger.warning("Cannot read manifest: %s", e)
        return None
    return manifest_to_form_data(doc)


def manifest_to_form_data(doc: Dict[str, Any]) -> WorkloadDescriptor:
    kind = str_or_none(doc.get("kind")) or ""
    if kind not in SUPPORTED_WORKLOAD_KINDS:
        logger.debug("Reading unsupported kind %r as a pod template workload", kind)

    metadata = ensure_dict(doc.get("metadata"))
    spec = ensure_dict(doc.get("spec"))

    # CronJob keeps its Job spec one level down
    job_spec = ensure_dict(ensure_dict(spec.get("jobTemplate")).get("spec")) if kind == "CronJob" else spec
    pod_spec = ensure_dict(ensure_dict(job_spec.get("template")).get("spec"))

    annotations = ensure_dict(metadata.get("annotations"))

    containers = [read_container(c) for c in ensure_list(pod_spec.get("containers"))]
    init_containers = [read_init_container(c) for c in ensure_list(pod_spec.get("initContainers"))]
    volumes = [read_volume(v) for v in ensure_list(pod_spec.get("volumes"))]
    pull_secrets = [
        str(s["name"])
        for s in ensure_list(pod_spec.get("imagePullSecrets"))
        if isinstance(s, dict) and s.get("name")
    ]
    node_selector = map_to_pairs(pod_spec.get("nodeSelector"))

    return WorkloadDescriptor(
        name=str_or_none(metadata.get("name")) or "",
        namespace=str_or_none(metadata.get("namespace")) or "default",
        description=str_or_none(annotations.get("description")),
        replicas=int_or_none(spec.get("replicas")),
        labels=map_to_pairs(metadata.get("labels")),
        annotations=[kv for kv in map_to_pairs(annotations) if kv.key != "description"],
        containers=containers,
        init_containers=init_containers or None,
        volumes=volumes or None,
        image_pull_secrets=pull_secrets or None,
        scheduling=read_scheduling(pod_spec.get("affinity")),
        node_selector=node_selector or None,
        tolerations=read_tolerations(pod_spec.get("tolerations")),
        strategy=_read_strategy(kind, spec.get("strategy")),
        min_ready_seconds=int_or_none(spec.get("minReadySeconds")),
        revision_history_limit=int_or_none(spec.get("revisionHistoryLimit")),
        progress_deadline_seconds=int_or_none(spec.get("progressDeadlineSeconds")),
        termination_grace_period_seconds=int_or_none(pod_spec.get("terminationGracePeriodSeconds")),
        dns_policy=str_or_none(pod_spec.get("dnsPolicy")),
        dns_config=read_dns_config(pod_spec.get("dnsConfig")),
        host_network=bool_or_none(pod_spec.get("hostNetwork")),
        service_name=str_or_none(spec.get("serviceName")),
        pod_management_policy=str_or_none(spec.get("podManagementPolicy")),
        schedule=str_or_none(spec.get("schedule")),
        suspend=bool_or_none(spec.get("suspend")),
        concurrency_policy=str_or_none(spec.get("concurrencyPolicy")),
        successful_jobs_history_limit=int_or_none(spec.get("successfulJobsHistoryLimit")),
        failed_jobs_history_limit=int_or_none(spec.get("failedJobsHistoryLimit")),
        completions=int_or_none(job_spec.get("completions")),
        parallelism=int_or_none(job_spec.get("parallelism")),
        backoff_limit=int_or_none(job_spec.get("backoffLimit")),
        active_deadline_seconds=int_or_none(job_spec.get("activeDeadlineSeconds")),
        ttl_seconds_after_finished=int_or_none(job_spec.get("ttlSecondsAfterFinished")),
    )


def map_to_pairs(mapping: Any) -> List[KeyValue]:
    return [KeyValue(key=str(k), value=str(v)) for k, v in ensure_dict(mapping).items()]


def _read_strategy(kind: str, strategy: Any) -> Optional[UpdateStrategySpec]:
    strategy = ensure_dict(strategy)
    if not strategy:
        return None
    if kind == "Rollout":
        canary = strategy.get("canary")
        if not isinstance(canary, dict):
            logger.debug("Dropping Rollout strategy without a canary section")
            return None
        return UpdateStrategySpec(
            type="RollingUpdate",
            rolling_update=validate_or_none(RollingUpdateSpec, canary),
        )
    return validate_or_none(UpdateStrategySpec, strategy)


def format_yaml_error(e: yaml.YAMLError) -> str:
    mark = getattr(e, "problem_mark", None)
    problem = getattr(e, "problem", None) or str(e)
    if mark is not None:
        return f"YAML syntax error at line {mark.line + 1}, column {mark.column + 1}: {problem}"
    return f"YAML syntax error: {problem}"
