from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from workload_converter.core.exceptions import ConverterError
from workload_converter.core.logging import LOG_LEVEL_ENV, setup_logging
from workload_converter.core.orchestrator import (
    ConversionConfig,
    convert_form_files,
    convert_manifest_files,
)
from workload_converter.core.templates import default_manifest
from workload_converter.output.render import render_json, render_table, render_yaml


app = typer.Typer(add_completion=False, help="Kubernetes workload form <-> YAML converter")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        envvar=LOG_LEVEL_ENV,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """Convert workload form descriptors to manifests and back."""
    setup_logging(log_level)


@app.command("to-yaml")
def to_yaml(
    files: List[Path] = typer.Argument(..., help="Form descriptor files (JSON or YAML)"),
    kind: str = typer.Option("Deployment", "--kind", help="Workload kind to generate"),
    strict: bool = typer.Option(
        False, "--strict/--no-strict", help="Fail when a descriptor has validation issues"
    ),
    output: str = typer.Option(
        "yaml",
        "--output",
        case_sensitive=False,
        help="Output format: yaml|table",
    ),
):
    """Generate workload manifests from form descriptors."""
    try:
        cfg = ConversionConfig(kind=kind, strict=strict)
        report = convert_form_files([str(p) for p in files], cfg)
    except ConverterError as exc:
        typer.echo(f"Fatal error: {exc}", err=True)
        raise typer.Exit(code=1)

    fmt = output.lower()
    if fmt == "yaml":
        typer.echo(render_yaml(report), nl=False)
        for w in report.warnings:
            typer.echo(f"Warning: {w}", err=True)
    elif fmt == "table":
        render_table(report)
    else:
        typer.echo("Unknown output format. Use yaml|table.", err=True)
        raise typer.Exit(code=2)

    raise typer.Exit(code=0)


@app.command("to-form")
def to_form(
    files: List[Path] = typer.Argument(..., help="Kubernetes YAML manifest files"),
    strict: bool = typer.Option(
        False, "--strict/--no-strict", help="Fail on the first manifest that cannot be parsed"
    ),
    output: str = typer.Option(
        "json",
        "--output",
        case_sensitive=False,
        help="Output format: json|table",
    ),
):
    """Read workload manifests back into form descriptors."""
    try:
        report = convert_manifest_files([str(p) for p in files], ConversionConfig(strict=strict))
    except ConverterError as exc:
        typer.echo(f"Fatal error: {exc}", err=True)
        raise typer.Exit(code=1)

    fmt = output.lower()
    if fmt == "json":
        typer.echo(render_json(report))
    elif fmt == "table":
        render_table(report)
    else:
        typer.echo("Unknown output format. Use json|table.", err=True)
        raise typer.Exit(code=2)

    raise typer.Exit(code=1 if report.failed else 0)


@app.command("template")
def template(
    kind: str = typer.Argument("Deployment", help="Workload kind"),
):
    """Print the default manifest a new workload of KIND starts from."""
    try:
        typer.echo(default_manifest(kind), nl=False)
    except ConverterError as exc:
        typer.echo(f"Fatal error: {exc}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
