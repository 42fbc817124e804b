from __future__ import annotations

from workload_converter.builders.container import DEFAULT_CONTAINER_NAME, DEFAULT_IMAGE
from workload_converter.builders.manifest import DEFAULT_SCHEDULE, form_data_to_yaml
from workload_converter.models.descriptor import ContainerSpec, WorkloadDescriptor
from workload_converter.models.kinds import REPLICATED_KINDS, normalize_kind


def default_descriptor(kind: str) -> WorkloadDescriptor:
    """Descriptor a create screen starts from for the given kind."""
    kind = normalize_kind(kind)
    return WorkloadDescriptor(
        name=f"example-{kind.lower()}",
        namespace="default",
        replicas=1 if kind in REPLICATED_KINDS else None,
        containers=[ContainerSpec(name=DEFAULT_CONTAINER_NAME, image=DEFAULT_IMAGE)],
        schedule=DEFAULT_SCHEDULE if kind == "CronJob" else None,
    )


def default_manifest(kind: str) -> str:
    return form_data_to_yaml(kind, default_descriptor(kind))
