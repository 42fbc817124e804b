from __future__ import annotations

import json
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table

from workload_converter.models.results import ConversionReport


def render_table(report: ConversionReport) -> None:
    console = Console()

    if report.manifests:
        table = Table(title="Generated Manifests")
        table.add_column("Source")
        table.add_column("Kind")
        table.add_column("Namespace")
        table.add_column("Name")
        table.add_column("Containers", justify="right")
        table.add_column("Replicas", justify="right")
        table.add_column("Issues", justify="right")
        for m in report.manifests:
            table.add_row(
                m.source,
                m.kind,
                m.namespace,
                m.name,
                str(m.containers),
                "" if m.replicas is None else str(m.replicas),
                str(len(m.issues)),
            )
        console.print(table)

    if report.forms:
        form_table = Table(title="Form Descriptors")
        form_table.add_column("Source")
        form_table.add_column("Kind")
        form_table.add_column("Namespace")
        form_table.add_column("Name")
        form_table.add_column("Containers", justify="right")
        form_table.add_column("Replicas", justify="right")
        form_table.add_column("Error")
        for f in report.forms:
            d = f.descriptor
            form_table.add_row(
                f.source,
                f.kind or "",
                d.namespace if d else "",
                d.name if d else "",
                str(len(d.containers)) if d else "",
                "" if d is None or d.replicas is None else str(d.replicas),
                f.error or "",
            )
        console.print(form_table)

    if report.warnings:
        warn_table = Table(title="Warnings")
        warn_table.add_column("Message")
        for w in report.warnings:
            warn_table.add_row(w)
        console.print(warn_table)


def render_yaml(report: ConversionReport) -> str:
    return "---\n".join(m.manifest for m in report.manifests)


def render_json(report: ConversionReport) -> str:
    data: List[Dict[str, Any]] = []
    for f in report.forms:
        item: Dict[str, Any] = {"source": f.source, "kind": f.kind}
        if f.descriptor is not None:
            item["descriptor"] = f.descriptor.model_dump(by_alias=True, exclude_none=True)
        if f.error:
            item["error"] = f.error
        data.append(item)
    return json.dumps(data, indent=2)
