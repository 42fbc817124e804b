from __future__ import annotations

from typing import Any, Dict, List, Optional

from workload_converter.models.descriptor import (
    ContainerPort,
    ContainerSpec,
    EmptyDirSource,
    EnvVar,
    EnvVarSource,
    ExecAction,
    HostPathSource,
    HttpGetAction,
    ConfigMapSource,
    InitContainerSpec,
    LifecycleHandler,
    LifecycleSpec,
    PersistentVolumeClaimSource,
    ProbeSpec,
    ResourceRequirements,
    SecretSource,
    TcpSocketAction,
    VolumeMount,
    VolumeSpec,
)
from workload_converter.utils.coerce import (
    ensure_dict,
    ensure_list,
    int_or_none,
    str_or_none,
    validate_list,
    validate_or_none,
)
from workload_converter.utils.text import join_command


# Checked in order; a volume with none of these keys reads back as emptyDir
VOLUME_TYPE_PRECEDENCE = (
    "hostPath",
    "configMap",
    "secret",
    "persistentVolumeClaim",
    "emptyDir",
)

_VOLUME_SOURCES = {
    "emptyDir": ("empty_dir", EmptyDirSource),
    "hostPath": ("host_path", HostPathSource),
    "configMap": ("config_map", ConfigMapSource),
    "secret": ("secret", SecretSource),
    "persistentVolumeClaim": ("persistent_volume_claim", PersistentVolumeClaimSource),
}


def read_container(c: Dict[str, Any]) -> ContainerSpec:
    c = ensure_dict(c)
    return ContainerSpec(
        name=str_or_none(c.get("name")) or "main",
        image=str_or_none(c.get("image")) or "",
        image_pull_policy=str_or_none(c.get("imagePullPolicy")),
        command=join_command(ensure_list(c.get("command"))),
        args=join_command(ensure_list(c.get("args"))),
        working_dir=str_or_none(c.get("workingDir")),
        ports=validate_list(ContainerPort, c.get("ports")),
        env=_read_env(c.get("env")),
        resources=validate_or_none(ResourceRequirements, c.get("resources")),
        volume_mounts=validate_list(VolumeMount, c.get("volumeMounts")),
        lifecycle=_read_lifecycle(c.get("lifecycle")),
        liveness_probe=read_probe(c.get("livenessProbe")),
        readiness_probe=read_probe(c.get("readinessProbe")),
        startup_probe=read_probe(c.get("startupProbe")),
    )


def read_init_container(c: Dict[str, Any]) -> InitContainerSpec:
    # init containers carry no probes, ports or lifecycle hooks in the form
    c = ensure_dict(c)
    return InitContainerSpec(
        name=str_or_none(c.get("name")) or "init",
        image=str_or_none(c.get("image")) or "",
        image_pull_policy=str_or_none(c.get("imagePullPolicy")),
        command=join_command(ensure_list(c.get("command"))),
        args=join_command(ensure_list(c.get("args"))),
        working_dir=str_or_none(c.get("workingDir")),
        env=_read_env(c.get("env")),
        resources=validate_or_none(ResourceRequirements, c.get("resources")),
        volume_mounts=validate_list(VolumeMount, c.get("volumeMounts")),
    )


def read_probe(probe: Any) -> Optional[ProbeSpec]:
    """Read a manifest probe back into the form.

    Any probe present in the manifest is taken as enabled. The handler type
    is inferred with exec first, then tcpSocket, falling back to httpGet.
    """
    if not isinstance(probe, dict):
        return None

    probe_type = "httpGet"
    if probe.get("exec"):
        probe_type = "exec"
    elif probe.get("tcpSocket"):
        probe_type = "tcpSocket"

    exec_action = None
    if probe.get("exec"):
        exec_action = ExecAction(
            command=join_command(ensure_list(ensure_dict(probe["exec"]).get("command")))
        )

    return ProbeSpec(
        enabled=True,
        type=probe_type,
        http_get=validate_or_none(HttpGetAction, probe.get("httpGet")),
        exec=exec_action,
        tcp_socket=validate_or_none(TcpSocketAction, probe.get("tcpSocket")),
        initial_delay_seconds=int_or_none(probe.get("initialDelaySeconds")),
        period_seconds=int_or_none(probe.get("periodSeconds")),
        timeout_seconds=int_or_none(probe.get("timeoutSeconds")),
        success_threshold=int_or_none(probe.get("successThreshold")),
        failure_threshold=int_or_none(probe.get("failureThreshold")),
    )


def read_volume(v: Dict[str, Any]) -> VolumeSpec:
    v = ensure_dict(v)
    volume_type = "emptyDir"
    for candidate in VOLUME_TYPE_PRECEDENCE:
        if v.get(candidate) is not None:
            volume_type = candidate
            break

    sources: Dict[str, Any] = {}
    for key, (attr, model) in _VOLUME_SOURCES.items():
        if key in v:
            # emptyDir: {} is a valid, empty source
            sources[attr] = validate_or_none(model, v.get(key) or {})

    return VolumeSpec(name=str_or_none(v.get("name")) or "", type=volume_type, **sources)


def _read_env(items: Any) -> Optional[List[EnvVar]]:
    out: List[EnvVar] = []
    for e in ensure_list(items):
        e = ensure_dict(e)
        if not e.get("name"):
            continue
        out.append(
            EnvVar(
                name=str(e["name"]),
                value=str_or_none(e.get("value")),
                value_from=validate_or_none(EnvVarSource, e.get("valueFrom")),
            )
        )
    return out or None


def _read_lifecycle(lifecycle: Any) -> Optional[LifecycleSpec]:
    if not isinstance(lifecycle, dict):
        return None

    def handler(hook: Any) -> Optional[LifecycleHandler]:
        if not isinstance(hook, dict):
            return None
        command = ensure_dict(hook.get("exec")).get("command")
        return LifecycleHandler(exec=ExecAction(command=join_command(ensure_list(command))))

    return LifecycleSpec(
        post_start=handler(lifecycle.get("postStart")),
        pre_stop=handler(lifecycle.get("preStop")),
    )
