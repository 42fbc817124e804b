from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

import yaml
from pydantic import ValidationError

from workload_converter.builders.manifest import build_manifest, dump_yaml
from workload_converter.core.exceptions import DescriptorError, ManifestParseError
from workload_converter.models.descriptor import WorkloadDescriptor
from workload_converter.models.kinds import SUPPORTED_WORKLOAD_KINDS, normalize_kind
from workload_converter.models.results import ConversionReport, FormResult, ManifestResult
from workload_converter.parsers.yaml_parser import format_yaml_error, manifest_to_form_data
from workload_converter.validators.descriptor import validate_descriptor


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionConfig:
    kind: str = "Deployment"
    strict: bool = False


def convert_form_files(paths: List[str], cfg: ConversionConfig) -> ConversionReport:
    """Turn form descriptor files (JSON or YAML) into manifests."""
    kind = normalize_kind(cfg.kind)
    report = ConversionReport()

    for p in paths:
        descriptor = load_descriptor(Path(p))
        issues = validate_descriptor(kind, descriptor)
        if issues and cfg.strict:
            raise DescriptorError(f"{p}: " + "; ".join(issues))
        report.warnings.extend(f"{p}: {issue}" for issue in issues)

        manifest = build_manifest(kind, descriptor)
        meta = manifest["metadata"]
        report.manifests.append(
            ManifestResult(
                source=str(p),
                kind=kind,
                name=meta["name"],
                namespace=meta["namespace"],
                containers=len(descriptor.containers),
                replicas=manifest["spec"].get("replicas"),
                manifest=dump_yaml(manifest),
                issues=issues,
            )
        )
        logger.info("Converted %s to %s %s", p, kind, meta["name"])

    return report


def convert_manifest_files(paths: List[str], cfg: ConversionConfig) -> ConversionReport:
    """Turn manifest files into form descriptors, one per workload document."""
    report = ConversionReport()

    for p in paths:
        path = Path(p)
        if not path.exists():
            raise ManifestParseError(f"File not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                docs = list(yaml.safe_load_all(f))
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            if isinstance(e, yaml.YAMLError):
                error = format_yaml_error(e)
            else:
                error = f"File is not UTF-8 text: {e.reason}"
            if cfg.strict:
                raise ManifestParseError(f"{path}: {error}") from e
            logger.warning("%s: %s", path, error)
            report.forms.append(FormResult(source=str(path), error=error))
            continue

        for doc in docs:
            if not doc or not isinstance(doc, dict):
                continue
            kind = doc.get("kind")
            if kind not in SUPPORTED_WORKLOAD_KINDS:
                report.warnings.append(f"{path}: skipped unsupported kind '{kind}'")
                continue
            report.forms.append(
                FormResult(source=str(path), kind=kind, descriptor=manifest_to_form_data(doc))
            )

    return report


def load_descriptor(path: Path) -> WorkloadDescriptor:
    if not path.exists():
        raise DescriptorError(f"File not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise DescriptorError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise DescriptorError(f"{path}: descriptor must be a mapping")
    try:
        return WorkloadDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorError(f"Invalid descriptor in {path}: {e}") from e

