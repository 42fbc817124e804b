from __future__ import annotations

import re
from typing import List, Optional

from workload_converter.models.descriptor import (
    ContainerSpec,
    NodeAffinityRow,
    PodAffinityRow,
    SchedulingRules,
    WorkloadDescriptor,
)
from workload_converter.models.kinds import normalize_kind


_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_VALUE_OPERATORS = {"In", "NotIn", "Gt", "Lt"}
_NODE_OPERATORS = {"In", "NotIn", "Exists", "DoesNotExist", "Gt", "Lt"}
_POD_OPERATORS = {"In", "NotIn", "Exists", "DoesNotExist"}


def validate_descriptor(kind: str, descriptor: WorkloadDescriptor) -> List[str]:
    """Check a form descriptor before it is submitted.

    Returns a list of human readable issues; an empty list means the
    descriptor is ready to convert. The converter itself never requires this.
    """
    kind = normalize_kind(kind)
    d = descriptor
    issues: List[str] = []

    if not d.name:
        issues.append("name is required")
    elif not _is_dns_label(d.name):
        issues.append(f"name '{d.name}' must be lowercase letters, digits and '-'")
    if not d.namespace:
        issues.append("namespace is required")
    if d.replicas is not None and d.replicas < 0:
        issues.append("replicas must be >= 0")

    if not d.containers:
        issues.append("at least one container is required")
    volume_names: set = set()
    for v in d.volumes or []:
        if not v.name:
            issues.append("volume name is required")
        elif v.name in volume_names:
            issues.append(f"volume '{v.name}' is declared more than once")
        volume_names.add(v.name)
    for c in d.containers:
        issues.extend(_container_issues(c, "container", volume_names))
    for c in d.init_containers or []:
        issues.extend(_container_issues(c, "init container", volume_names))

    if kind == "CronJob":
        if not d.schedule:
            issues.append("schedule is required for CronJob")
        elif len(d.schedule.split()) != 5:
            issues.append(f"schedule '{d.schedule}' must have five cron fields")

    if d.scheduling is not None:
        issues.extend(_scheduling_issues(d.scheduling))

    for kv in d.labels:
        if bool(kv.key) != bool(kv.value):
            issues.append(f"label '{kv.key or kv.value}' needs both a key and a value")

    return issues


def _container_issues(c: ContainerSpec, what: str, volumes: set) -> List[str]:
    issues: List[str] = []
    label = c.name or "<unnamed>"
    if not c.name:
        issues.append(f"{what} name is required")
    elif not _is_dns_label(c.name):
        issues.append(f"{what} name '{c.name}' must be lowercase letters, digits and '-'")
    if not c.image:
        issues.append(f"{what} '{label}': image is required")
    for p in c.ports or []:
        if p.container_port is None:
            issues.append(f"{what} '{label}': container port is required")
        elif not 1 <= p.container_port <= 65535:
            issues.append(f"{what} '{label}': port {p.container_port} is out of range")
    for e in c.env or []:
        if not e.name:
            issues.append(f"{what} '{label}': environment variable name is required")
    for vm in c.volume_mounts or []:
        if not vm.name:
            issues.append(f"{what} '{label}': volume mount needs a volume")
        elif vm.name not in volumes:
            issues.append(f"{what} '{label}': volume mount '{vm.name}' has no matching volume")
        if not vm.mount_path:
            issues.append(f"{what} '{label}': mount path is required")
    return issues


def _scheduling_issues(rules: SchedulingRules) -> List[str]:
    issues: List[str] = []
    node_rows: List[NodeAffinityRow] = [
        *(rules.node_affinity_required or []),
        *(rules.node_affinity_preferred or []),
    ]
    for row in node_rows:
        issues.extend(_condition_issues("node affinity", row.key, row.operator, row.values, _NODE_OPERATORS))
    for row in rules.node_affinity_preferred or []:
        issues.extend(_weight_issues("node affinity", row.weight))

    pod_rows = {
        "pod affinity": (rules.pod_affinity_required, rules.pod_affinity_preferred),
        "pod anti-affinity": (rules.pod_anti_affinity_required, rules.pod_anti_affinity_preferred),
    }
    for what, (required, preferred) in pod_rows.items():
        rows: List[PodAffinityRow] = [*(required or []), *(preferred or [])]
        for row in rows:
            if not row.topology_key:
                issues.append(f"{what}: topology key is required")
            issues.extend(
                _condition_issues(what, row.label_key, row.operator, row.label_values, _POD_OPERATORS)
            )
        for row in preferred or []:
            issues.extend(_weight_issues(what, row.weight))
    return issues


def _condition_issues(
    what: str, key: str, operator: str, values: Optional[str], operators: set
) -> List[str]:
    issues: List[str] = []
    if not key:
        issues.append(f"{what}: label key is required")
    if operator not in operators:
        issues.append(f"{what}: unknown operator '{operator}'")
    elif operator in _VALUE_OPERATORS and not (values or "").strip(", "):
        issues.append(f"{what}: operator {operator} on '{key}' needs values")
    return issues


def _weight_issues(what: str, weight: int) -> List[str]:
    if not 1 <= weight <= 100:
        return [f"{what}: weight {weight} must be between 1 and 100"]
    return []


def _is_dns_label(name: str) -> bool:
    return len(name) <= 63 and bool(_DNS_LABEL.match(name))
