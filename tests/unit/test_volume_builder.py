from __future__ import annotations

from workload_converter.builders.volume import build_volume
from workload_converter.models.descriptor import VolumeSpec


def test_empty_dir_ignores_other_sources():
    vol = VolumeSpec.model_validate(
        {
            "name": "scratch",
            "type": "emptyDir",
            "hostPath": {"path": "/var/stale"},
            "configMap": {"name": "stale"},
            "secret": {"secretName": "stale"},
            "persistentVolumeClaim": {"claimName": "stale"},
        }
    )
    out = build_volume(vol)
    assert out == {"name": "scratch", "emptyDir": {}}
    for key in ("hostPath", "configMap", "secret", "persistentVolumeClaim"):
        assert key not in out


def test_each_type_emits_its_source():
    assert build_volume(
        VolumeSpec.model_validate({"name": "h", "type": "hostPath", "hostPath": {"path": "/srv", "type": "Directory"}})
    ) == {"name": "h", "hostPath": {"path": "/srv", "type": "Directory"}}
    assert build_volume(
        VolumeSpec.model_validate(
            {
                "name": "c",
                "type": "configMap",
                "configMap": {"name": "cfg", "items": [{"key": "a", "path": "a.conf"}], "defaultMode": 420},
            }
        )
    ) == {"name": "c", "configMap": {"name": "cfg", "items": [{"key": "a", "path": "a.conf"}], "defaultMode": 420}}
    assert build_volume(
        VolumeSpec.model_validate({"name": "s", "type": "secret", "secret": {"secretName": "tls"}})
    ) == {"name": "s", "secret": {"secretName": "tls"}}
    assert build_volume(
        VolumeSpec.model_validate(
            {"name": "p", "type": "persistentVolumeClaim", "persistentVolumeClaim": {"claimName": "data", "readOnly": True}}
        )
    ) == {"name": "p", "persistentVolumeClaim": {"claimName": "data", "readOnly": True}}


def test_missing_source_gets_placeholder():
    out = build_volume(VolumeSpec(name="p", type="persistentVolumeClaim"))
    assert out == {"name": "p", "persistentVolumeClaim": {"claimName": ""}}
