from __future__ import annotations

from typing import Any, Dict, List, Optional

from workload_converter.models.descriptor import (
    DnsConfigSpec,
    KeyValue,
    PodAffinityRow,
    SchedulingRules,
    TolerationSpec,
    WeightedPodAffinityRow,
)
from workload_converter.utils.text import pairs_to_map, split_comma


REQUIRED = "requiredDuringSchedulingIgnoredDuringExecution"
PREFERRED = "preferredDuringSchedulingIgnoredDuringExecution"


def match_expression(key: str, operator: str, values: Optional[str]) -> Dict[str, Any]:
    expr: Dict[str, Any] = {"key": key, "operator": operator}
    parsed = split_comma(values)
    if parsed:
        expr["values"] = parsed
    return expr


def build_affinity(rules: Optional[SchedulingRules]) -> Optional[Dict[str, Any]]:
    """Fold single-condition form rows into a pod ``affinity`` object.

    Required node rows are ANDed into one node selector term; every other
    row becomes its own term with a single match expression.
    """
    if rules is None:
        return None

    affinity: Dict[str, Any] = {}

    node_affinity: Dict[str, Any] = {}
    if rules.node_affinity_required:
        node_affinity[REQUIRED] = {
            "nodeSelectorTerms": [
                {
                    "matchExpressions": [
                        match_expression(r.key, r.operator, r.values)
                        for r in rules.node_affinity_required
                    ]
                }
            ]
        }
    if rules.node_affinity_preferred:
        node_affinity[PREFERRED] = [
            {
                "weight": r.weight,
                "preference": {"matchExpressions": [match_expression(r.key, r.operator, r.values)]},
            }
            for r in rules.node_affinity_preferred
        ]
    if node_affinity:
        affinity["nodeAffinity"] = node_affinity

    pod_affinity = _build_pod_affinity(rules.pod_affinity_required, rules.pod_affinity_preferred)
    if pod_affinity:
        affinity["podAffinity"] = pod_affinity

    anti_affinity = _build_pod_affinity(
        rules.pod_anti_affinity_required, rules.pod_anti_affinity_preferred
    )
    if anti_affinity:
        affinity["podAntiAffinity"] = anti_affinity

    return affinity or None


def _pod_affinity_term(row: PodAffinityRow) -> Dict[str, Any]:
    return {
        "topologyKey": row.topology_key,
        "labelSelector": {
            "matchExpressions": [match_expression(row.label_key, row.operator, row.label_values)]
        },
    }


def _build_pod_affinity(
    required: Optional[List[PodAffinityRow]],
    preferred: Optional[List[WeightedPodAffinityRow]],
) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if required:
        out[REQUIRED] = [_pod_affinity_term(r) for r in required]
    if preferred:
        out[PREFERRED] = [
            {"weight": r.weight, "podAffinityTerm": _pod_affinity_term(r)} for r in preferred
        ]
    return out


def build_tolerations(tolerations: Optional[List[TolerationSpec]]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for t in tolerations or []:
        tol: Dict[str, Any] = {}
        if t.key:
            tol["key"] = t.key
        tol["operator"] = t.operator
        if t.value:
            tol["value"] = t.value
        if t.effect:
            tol["effect"] = t.effect
        if t.toleration_seconds is not None:
            tol["tolerationSeconds"] = t.toleration_seconds
        out.append(tol)
    return out


def build_node_selector(rows: Optional[List[KeyValue]]) -> Dict[str, str]:
    return pairs_to_map(rows)


def build_dns_config(dns: Optional[DnsConfigSpec]) -> Optional[Dict[str, Any]]:
    if dns is None:
        return None
    out: Dict[str, Any] = {}
    nameservers = split_comma(dns.nameservers)
    if nameservers:
        out["nameservers"] = nameservers
    searches = split_comma(dns.searches)
    if searches:
        out["searches"] = searches
    if dns.options:
        options = []
        for o in dns.options:
            if not o.name:
                continue
            opt: Dict[str, Any] = {"name": o.name}
            if o.value is not None:
                opt["value"] = o.value
            options.append(opt)
        if options:
            out["options"] = options
    return out or None
