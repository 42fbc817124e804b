from __future__ import annotations

from typing import Any, Dict, List, Optional

from workload_converter.models.descriptor import KeyToPath, VolumeSpec


def build_volume(volume: VolumeSpec) -> Dict[str, Any]:
    """Emit a pod volume carrying only the source selected by ``volume.type``.

    Sources for other types left over from earlier edits are ignored.
    """
    spec: Dict[str, Any] = {"name": volume.name}

    if volume.type == "emptyDir":
        empty_dir: Dict[str, Any] = {}
        if volume.empty_dir is not None:
            if volume.empty_dir.medium:
                empty_dir["medium"] = volume.empty_dir.medium
            if volume.empty_dir.size_limit:
                empty_dir["sizeLimit"] = volume.empty_dir.size_limit
        spec["emptyDir"] = empty_dir
    elif volume.type == "hostPath":
        src = volume.host_path
        host_path: Dict[str, Any] = {"path": src.path if src else ""}
        if src is not None and src.type:
            host_path["type"] = src.type
        spec["hostPath"] = host_path
    elif volume.type == "configMap":
        src = volume.config_map
        config_map: Dict[str, Any] = {"name": src.name if src else ""}
        if src is not None:
            _add_projection(config_map, src.items, src.default_mode)
        spec["configMap"] = config_map
    elif volume.type == "secret":
        src = volume.secret
        secret: Dict[str, Any] = {"secretName": src.secret_name if src else ""}
        if src is not None:
            _add_projection(secret, src.items, src.default_mode)
        spec["secret"] = secret
    elif volume.type == "persistentVolumeClaim":
        src = volume.persistent_volume_claim
        pvc: Dict[str, Any] = {"claimName": src.claim_name if src else ""}
        if src is not None and src.read_only:
            pvc["readOnly"] = True
        spec["persistentVolumeClaim"] = pvc

    return spec


def _add_projection(
    target: Dict[str, Any], items: Optional[List[KeyToPath]], default_mode: Optional[int]
) -> None:
    if items:
        projected = []
        for item in items:
            entry: Dict[str, Any] = {"key": item.key, "path": item.path}
            if item.mode is not None:
                entry["mode"] = item.mode
            projected.append(entry)
        target["items"] = projected
    if default_mode:
        target["defaultMode"] = default_mode
