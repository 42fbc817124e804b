from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from workload_converter.builders.scheduling import PREFERRED, REQUIRED
from workload_converter.models.descriptor import (
    DnsConfigSpec,
    DnsOption,
    NodeAffinityRow,
    PodAffinityRow,
    SchedulingRules,
    TolerationSpec,
    WeightedNodeAffinityRow,
    WeightedPodAffinityRow,
)
from workload_converter.utils.coerce import (
    ensure_dict,
    ensure_list,
    int_or_none,
    str_or_none,
    validate_list,
)
from workload_converter.utils.text import join_comma


logger = logging.getLogger(__name__)

Condition = Tuple[str, str, str]  # key, operator, comma separated values


def read_scheduling(affinity: Any) -> Optional[SchedulingRules]:
    """Unfold a pod ``affinity`` object into single-condition form rows.

    Only shapes the rows can express survive: the first node selector term of
    a required node affinity, and the first condition of every other term.
    """
    affinity = ensure_dict(affinity)
    if not affinity:
        return None

    rules = SchedulingRules()

    node = ensure_dict(affinity.get("nodeAffinity"))
    terms = ensure_list(ensure_dict(node.get(REQUIRED)).get("nodeSelectorTerms"))
    if terms:
        if len(terms) > 1:
            logger.debug("Keeping the first of %d node selector terms", len(terms))
        rows = [
            NodeAffinityRow(key=k, operator=op, values=vals)
            for k, op, vals in _conditions(ensure_dict(terms[0]))
        ]
        rules.node_affinity_required = rows or None

    preferred_rows: List[WeightedNodeAffinityRow] = []
    for term in ensure_list(node.get(PREFERRED)):
        term = ensure_dict(term)
        conditions = _conditions(ensure_dict(term.get("preference")))
        if not conditions:
            continue
        k, op, vals = conditions[0]
        preferred_rows.append(
            WeightedNodeAffinityRow(
                weight=int_or_none(term.get("weight")) or 1, key=k, operator=op, values=vals
            )
        )
    rules.node_affinity_preferred = preferred_rows or None

    pod = ensure_dict(affinity.get("podAffinity"))
    rules.pod_affinity_required = _required_pod_rows(pod.get(REQUIRED))
    rules.pod_affinity_preferred = _preferred_pod_rows(pod.get(PREFERRED))

    anti = ensure_dict(affinity.get("podAntiAffinity"))
    rules.pod_anti_affinity_required = _required_pod_rows(anti.get(REQUIRED))
    rules.pod_anti_affinity_preferred = _preferred_pod_rows(anti.get(PREFERRED))

    return None if rules.is_empty() else rules


def read_tolerations(items: Any) -> Optional[List[TolerationSpec]]:
    out: List[TolerationSpec] = []
    for t in ensure_list(items):
        t = ensure_dict(t)
        out.append(
            TolerationSpec(
                key=str_or_none(t.get("key")),
                operator=str_or_none(t.get("operator")) or "Equal",
                value=str_or_none(t.get("value")),
                effect=str_or_none(t.get("effect")),
                toleration_seconds=int_or_none(t.get("tolerationSeconds")),
            )
        )
    return out or None


def read_dns_config(dns: Any) -> Optional[DnsConfigSpec]:
    if not isinstance(dns, dict):
        return None
    return DnsConfigSpec(
        nameservers=join_comma(ensure_list(dns.get("nameservers"))),
        searches=join_comma(ensure_list(dns.get("searches"))),
        options=validate_list(DnsOption, dns.get("options")),
    )


def _conditions(selector: Dict[str, Any]) -> List[Condition]:
    out: List[Condition] = []
    for expr in ensure_list(selector.get("matchExpressions")):
        expr = ensure_dict(expr)
        key = str_or_none(expr.get("key"))
        if not key:
            continue
        out.append(
            (key, str_or_none(expr.get("operator")) or "In", join_comma(ensure_list(expr.get("values"))))
        )
    for key, value in ensure_dict(selector.get("matchLabels")).items():
        out.append((str(key), "In", str(value)))
    return out


def _pod_term(term: Dict[str, Any]) -> Optional[Tuple[str, Condition]]:
    conditions = _conditions(ensure_dict(term.get("labelSelector")))
    if not conditions:
        return None
    if len(conditions) > 1:
        logger.debug("Keeping the first of %d pod affinity conditions", len(conditions))
    return str_or_none(term.get("topologyKey")) or "", conditions[0]


def _required_pod_rows(items: Any) -> Optional[List[PodAffinityRow]]:
    rows: List[PodAffinityRow] = []
    for term in ensure_list(items):
        parsed = _pod_term(ensure_dict(term))
        if parsed is None:
            continue
        topology, (k, op, vals) = parsed
        rows.append(PodAffinityRow(topology_key=topology, label_key=k, operator=op, label_values=vals))
    return rows or None


def _preferred_pod_rows(items: Any) -> Optional[List[WeightedPodAffinityRow]]:
    rows: List[WeightedPodAffinityRow] = []
    for weighted in ensure_list(items):
        weighted = ensure_dict(weighted)
        parsed = _pod_term(ensure_dict(weighted.get("podAffinityTerm")))
        if parsed is None:
            continue
        topology, (k, op, vals) = parsed
        rows.append(
            WeightedPodAffinityRow(
                weight=int_or_none(weighted.get("weight")) or 1,
                topology_key=topology,
                label_key=k,
                operator=op,
                label_values=vals,
            )
        )
    return rows or None
