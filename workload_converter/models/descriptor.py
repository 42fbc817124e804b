from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Quantity = Union[str, int, float]
PortValue = Union[int, str]
ProbeType = Literal["httpGet", "exec", "tcpSocket"]
VolumeType = Literal["emptyDir", "hostPath", "configMap", "secret", "persistentVolumeClaim"]


class FormModel(BaseModel):
    """Base for form-side models: snake_case attributes, camelCase form keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KeyValue(FormModel):
    key: str = ""
    value: str = ""


# --- probes and lifecycle -------------------------------------------------


class HttpGetAction(FormModel):
    path: Optional[str] = None
    port: Optional[PortValue] = None
    scheme: Optional[str] = None  # HTTP | HTTPS


class ExecAction(FormModel):
    command: str = ""  # newline separated, one argv token per line


class TcpSocketAction(FormModel):
    port: Optional[PortValue] = None


class ProbeSpec(FormModel):
    # enabled and type exist only on the form side
    enabled: bool = False
    type: ProbeType = "httpGet"
    http_get: Optional[HttpGetAction] = None
    exec: Optional[ExecAction] = None
    tcp_socket: Optional[TcpSocketAction] = None
    initial_delay_seconds: Optional[int] = None
    period_seconds: Optional[int] = None
    timeout_seconds: Optional[int] = None
    success_threshold: Optional[int] = None
    failure_threshold: Optional[int] = None


class LifecycleHandler(FormModel):
    exec: Optional[ExecAction] = None


class LifecycleSpec(FormModel):
    post_start: Optional[LifecycleHandler] = None
    pre_stop: Optional[LifecycleHandler] = None


# --- container ------------------------------------------------------------


class ContainerPort(FormModel):
    name: Optional[str] = None
    container_port: Optional[int] = None
    protocol: Optional[str] = None  # TCP | UDP | SCTP


class KeyRef(FormModel):
    name: str = ""
    key: str = ""


class FieldRef(FormModel):
    field_path: str = ""


class ResourceFieldRef(FormModel):
    container_name: Optional[str] = None
    resource: str = ""


class EnvVarSource(FormModel):
    config_map_key_ref: Optional[KeyRef] = None
    secret_key_ref: Optional[KeyRef] = None
    field_ref: Optional[FieldRef] = None
    resource_field_ref: Optional[ResourceFieldRef] = None


class EnvVar(FormModel):
    name: str = ""
    value: Optional[str] = None
    value_from: Optional[EnvVarSource] = None


class ResourceQuantities(FormModel):
    cpu: Optional[Quantity] = None
    memory: Optional[Quantity] = None
    gpu: Optional[Quantity] = Field(default=None, alias="nvidia.com/gpu")


class ResourceRequirements(FormModel):
    requests: Optional[ResourceQuantities] = None
    limits: Optional[ResourceQuantities] = None


class VolumeMount(FormModel):
    name: str = ""
    mount_path: str = ""
    sub_path: Optional[str] = None
    read_only: Optional[bool] = None


class ContainerSpec(FormModel):
    name: str = ""
    image: str = ""
    image_pull_policy: Optional[str] = None  # Always | IfNotPresent | Never
    command: str = ""
    args: str = ""
    working_dir: Optional[str] = None
    ports: Optional[List[ContainerPort]] = None
    env: Optional[List[EnvVar]] = None
    resources: Optional[ResourceRequirements] = None
    volume_mounts: Optional[List[VolumeMount]] = None
    lifecycle: Optional[LifecycleSpec] = None
    liveness_probe: Optional[ProbeSpec] = None
    readiness_probe: Optional[ProbeSpec] = None
    startup_probe: Optional[ProbeSpec] = None


class InitContainerSpec(ContainerSpec):
    pass


# --- volumes --------------------------------------------------------------


class KeyToPath(FormModel):
    key: str = ""
    path: str = ""
    mode: Optional[int] = None


class EmptyDirSource(FormModel):
    medium: Optional[str] = None  # "" | Memory
    size_limit: Optional[Quantity] = None


class HostPathSource(FormModel):
    path: str = ""
    type: Optional[str] = None


class ConfigMapSource(FormModel):
    name: str = ""
    items: Optional[List[KeyToPath]] = None
    default_mode: Optional[int] = None


class SecretSource(FormModel):
    secret_name: str = ""
    items: Optional[List[KeyToPath]] = None
    default_mode: Optional[int] = None


class PersistentVolumeClaimSource(FormModel):
    claim_name: str = ""
    read_only: Optional[bool] = None


class VolumeSpec(FormModel):
    name: str = ""
    type: VolumeType = "emptyDir"
    empty_dir: Optional[EmptyDirSource] = None
    host_path: Optional[HostPathSource] = None
    config_map: Optional[ConfigMapSource] = None
    secret: Optional[SecretSource] = None
    persistent_volume_claim: Optional[PersistentVolumeClaimSource] = None


# --- scheduling -----------------------------------------------------------


class NodeAffinityRow(FormModel):
    key: str = ""
    operator: str = "In"
    values: str = ""  # comma separated


class WeightedNodeAffinityRow(NodeAffinityRow):
    weight: int = 1


class PodAffinityRow(FormModel):
    topology_key: str = ""
    label_key: str = ""
    operator: str = "In"
    label_values: str = ""  # comma separated


class WeightedPodAffinityRow(PodAffinityRow):
    weight: int = 1


class SchedulingRules(FormModel):
    node_affinity_required: Optional[List[NodeAffinityRow]] = None
    node_affinity_preferred: Optional[List[WeightedNodeAffinityRow]] = None
    pod_affinity_required: Optional[List[PodAffinityRow]] = None
    pod_affinity_preferred: Optional[List[WeightedPodAffinityRow]] = None
    pod_anti_affinity_required: Optional[List[PodAffinityRow]] = None
    pod_anti_affinity_preferred: Optional[List[WeightedPodAffinityRow]] = None

    def is_empty(self) -> bool:
        return not any(getattr(self, f) for f in type(self).model_fields)


class TolerationSpec(FormModel):
    key: Optional[str] = None
    operator: str = "Equal"  # Equal | Exists
    value: Optional[str] = None
    effect: Optional[str] = None  # NoSchedule | PreferNoSchedule | NoExecute
    toleration_seconds: Optional[int] = None


class DnsOption(FormModel):
    name: str = ""
    value: Optional[str] = None


class DnsConfigSpec(FormModel):
    nameservers: str = ""  # comma separated
    searches: str = ""  # comma separated
    options: Optional[List[DnsOption]] = None


class RollingUpdateSpec(FormModel):
    max_unavailable: Optional[PortValue] = None
    max_surge: Optional[PortValue] = None


class UpdateStrategySpec(FormModel):
    type: str = "RollingUpdate"  # RollingUpdate | Recreate
    rolling_update: Optional[RollingUpdateSpec] = None


# --- workload -------------------------------------------------------------


class WorkloadDescriptor(FormModel):
    name: str = ""
    namespace: str = ""
    description: Optional[str] = None
    replicas: Optional[int] = None
    labels: List[KeyValue] = Field(default_factory=list)
    annotations: List[KeyValue] = Field(default_factory=list)

    containers: List[ContainerSpec] = Field(default_factory=list)
    init_containers: Optional[List[InitContainerSpec]] = None
    volumes: Optional[List[VolumeSpec]] = None
    image_pull_secrets: Optional[List[str]] = None

    scheduling: Optional[SchedulingRules] = None
    node_selector: Optional[List[KeyValue]] = None
    tolerations: Optional[List[TolerationSpec]] = None

    strategy: Optional[UpdateStrategySpec] = None
    min_ready_seconds: Optional[int] = None
    revision_history_limit: Optional[int] = None
    progress_deadline_seconds: Optional[int] = None

    termination_grace_period_seconds: Optional[int] = None
    dns_policy: Optional[str] = None  # ClusterFirst | ClusterFirstWithHostNet | Default | None
    dns_config: Optional[DnsConfigSpec] = None
    host_network: Optional[bool] = None

    # StatefulSet
    service_name: Optional[str] = None
    pod_management_policy: Optional[str] = None  # OrderedReady | Parallel

    # CronJob
    schedule: Optional[str] = None
    suspend: Optional[bool] = None
    concurrency_policy: Optional[str] = None  # Allow | Forbid | Replace
    successful_jobs_history_limit: Optional[int] = None
    failed_jobs_history_limit: Optional[int] = None

    # Job
    completions: Optional[int] = None
    parallelism: Optional[int] = None
    backoff_limit: Optional[int] = None
    active_deadline_seconds: Optional[int] = None
    ttl_seconds_after_finished: Optional[int] = None
