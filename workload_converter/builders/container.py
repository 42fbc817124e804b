from __future__ import annotations

from typing import Any, Dict, List, Optional

from workload_converter.models.descriptor import (
    ContainerSpec,
    EnvVar,
    LifecycleHandler,
    ProbeSpec,
    ResourceQuantities,
    ResourceRequirements,
)
from workload_converter.utils.text import split_command


DEFAULT_CONTAINER_NAME = "main"
DEFAULT_IMAGE = "nginx:latest"

_PROBE_TIMINGS = (
    ("initial_delay_seconds", "initialDelaySeconds"),
    ("period_seconds", "periodSeconds"),
    ("timeout_seconds", "timeoutSeconds"),
    ("success_threshold", "successThreshold"),
    ("failure_threshold", "failureThreshold"),
)


def build_container(container: ContainerSpec) -> Dict[str, Any]:
    spec: Dict[str, Any] = {
        "name": container.name or DEFAULT_CONTAINER_NAME,
        "image": container.image or DEFAULT_IMAGE,
    }
    if container.image_pull_policy:
        spec["imagePullPolicy"] = container.image_pull_policy

    command = split_command(container.command)
    if command:
        spec["command"] = command
    args = split_command(container.args)
    if args:
        spec["args"] = args
    if container.working_dir:
        spec["workingDir"] = container.working_dir

    if container.ports:
        ports = []
        for p in container.ports:
            if p.container_port is None:
                continue
            port: Dict[str, Any] = {}
            if p.name:
                port["name"] = p.name
            port["containerPort"] = p.container_port
            if p.protocol and p.protocol != "TCP":
                port["protocol"] = p.protocol
            ports.append(port)
        if ports:
            spec["ports"] = ports

    if container.env:
        spec["env"] = [build_env_var(e) for e in container.env]

    resources = build_resources(container.resources)
    if resources:
        spec["resources"] = resources

    if container.volume_mounts:
        mounts = []
        for vm in container.volume_mounts:
            mount: Dict[str, Any] = {"name": vm.name, "mountPath": vm.mount_path}
            if vm.sub_path:
                mount["subPath"] = vm.sub_path
            if vm.read_only:
                mount["readOnly"] = True
            mounts.append(mount)
        spec["volumeMounts"] = mounts

    if container.lifecycle:
        lifecycle: Dict[str, Any] = {}
        post_start = _build_lifecycle_handler(container.lifecycle.post_start)
        if post_start:
            lifecycle["postStart"] = post_start
        pre_stop = _build_lifecycle_handler(container.lifecycle.pre_stop)
        if pre_stop:
            lifecycle["preStop"] = pre_stop
        if lifecycle:
            spec["lifecycle"] = lifecycle

    for attr, key in (
        ("startup_probe", "startupProbe"),
        ("liveness_probe", "livenessProbe"),
        ("readiness_probe", "readinessProbe"),
    ):
        probe = build_probe(getattr(container, attr))
        if probe:
            spec[key] = probe

    return spec


def build_probe(probe: Optional[ProbeSpec]) -> Optional[Dict[str, Any]]:
    """Build a probe for the manifest, or None when it must be left out.

    A disabled probe is dropped whatever its handler fields hold, and only
    the handler selected by ``type`` is emitted.
    """
    if probe is None or not probe.enabled:
        return None

    config: Dict[str, Any] = {}
    if probe.type == "httpGet" and probe.http_get is not None:
        http_get: Dict[str, Any] = {
            "path": probe.http_get.path or "/",
            "port": probe.http_get.port or 80,
        }
        if probe.http_get.scheme:
            http_get["scheme"] = probe.http_get.scheme
        config["httpGet"] = http_get
    elif probe.type == "exec" and probe.exec is not None:
        command = split_command(probe.exec.command)
        if command:
            config["exec"] = {"command": command}
    elif probe.type == "tcpSocket" and probe.tcp_socket is not None:
        config["tcpSocket"] = {"port": probe.tcp_socket.port}

    for attr, key in _PROBE_TIMINGS:
        value = getattr(probe, attr)
        if value is not None:
            config[key] = value

    return config or None


def build_env_var(env: EnvVar) -> Dict[str, Any]:
    source = env.value_from
    if source is not None:
        # first populated reference wins
        if source.config_map_key_ref is not None:
            ref = source.config_map_key_ref
            return {
                "name": env.name,
                "valueFrom": {"configMapKeyRef": {"name": ref.name, "key": ref.key}},
            }
        if source.secret_key_ref is not None:
            ref = source.secret_key_ref
            return {
                "name": env.name,
                "valueFrom": {"secretKeyRef": {"name": ref.name, "key": ref.key}},
            }
        if source.field_ref is not None:
            return {
                "name": env.name,
                "valueFrom": {"fieldRef": {"fieldPath": source.field_ref.field_path}},
            }
        if source.resource_field_ref is not None:
            rf = source.resource_field_ref
            ref_spec: Dict[str, Any] = {"resource": rf.resource}
            if rf.container_name:
                ref_spec = {"containerName": rf.container_name, **ref_spec}
            return {"name": env.name, "valueFrom": {"resourceFieldRef": ref_spec}}
    return {"name": env.name, "value": env.value or ""}


def build_resources(resources: Optional[ResourceRequirements]) -> Dict[str, Dict[str, Any]]:
    if resources is None:
        return {}
    out: Dict[str, Dict[str, Any]] = {}
    requests = _quantities(resources.requests, include_gpu=False)
    if requests:
        out["requests"] = requests
    limits = _quantities(resources.limits, include_gpu=True)
    if limits:
        out["limits"] = limits
    return out


def _quantities(q: Optional[ResourceQuantities], *, include_gpu: bool) -> Dict[str, Any]:
    if q is None:
        return {}
    out: Dict[str, Any] = {}
    if q.cpu:
        out["cpu"] = q.cpu
    if q.memory:
        out["memory"] = q.memory
    if include_gpu and q.gpu:
        out["nvidia.com/gpu"] = q.gpu
    return out


def _build_lifecycle_handler(handler: Optional[LifecycleHandler]) -> Optional[Dict[str, Any]]:
    if handler is None or handler.exec is None:
        return None
    cmd: List[str] = split_command(handler.exec.command)
    if not cmd:
        return None
    return {"exec": {"command": cmd}}
