from __future__ import annotations

from typing import Dict, Tuple

from workload_converter.core.exceptions import UnsupportedKindError


SUPPORTED_WORKLOAD_KINDS: Tuple[str, ...] = (
    "Deployment",
    "StatefulSet",
    "DaemonSet",
    "Job",
    "CronJob",
    "Rollout",
)

API_VERSIONS: Dict[str, str] = {
    "Deployment": "apps/v1",
    "StatefulSet": "apps/v1",
    "DaemonSet": "apps/v1",
    "Job": "batch/v1",
    "CronJob": "batch/v1",
    "Rollout": "argoproj.io/v1alpha1",
}

# Kinds whose spec carries a replica count
REPLICATED_KINDS = {"Deployment", "StatefulSet", "Rollout"}


def normalize_kind(kind: str) -> str:
    """Return the canonical spelling of a workload kind.

    Matching is case-insensitive, so ``cronjob`` and ``CronJob`` are the same.
    """
    wanted = str(kind or "").strip().lower()
    for k in SUPPORTED_WORKLOAD_KINDS:
        if k.lower() == wanted:
            return k
    raise UnsupportedKindError(
        f"Unsupported workload kind '{kind}'. Use one of: {', '.join(SUPPORTED_WORKLOAD_KINDS)}"
    )
