"""CLI entry point for plystream pipelines.

Usage:
    plystream run                                  # Run the pipeline
    plystream info                                 # Show pipeline stages
    plystream schema plystream.stages.write_ply_custom  # Stage config schema
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from plystream.core.errors import PlyStreamError
from plystream.core.logging import setup_logging

app = typer.Typer(name="plystream", help="Streaming binary PLY point cloud pipeline")
console = Console()

DEFAULT_CONFIG = Path("configs/pipeline.yaml")


@app.command()
def run(
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    log_level: str = typer.Option("INFO", help="Logging level"),
    log_file: Optional[Path] = typer.Option(None, help="Also write the run log to this file"),
) -> None:
    """Run the full pipeline."""
    try:
        setup_logging(log_level, log_file)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2)
    from plystream.core.pipeline_runner import run_pipeline

    try:
        passes = run_pipeline(config)
    except PlyStreamError as exc:
        console.print(f"[red]Pipeline failed: {exc}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Done in {passes} pass(es).[/green]")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Show pipeline stages in order."""
    from plystream.core.pipeline_runner import load_pipeline_config

    pipeline_cfg = load_pipeline_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name}")
    table.add_column("#", style="dim")
    table.add_column("Stage", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Config", style="dim")

    for i, stage in enumerate(pipeline_cfg.stages, 1):
        table.add_row(
            str(i),
            stage.name,
            stage.module,
            "Y" if stage.enabled else "N",
            json.dumps(stage.config) if stage.config else (stage.config_file or "-"),
        )
    console.print(table)
    console.print(f"Source: {pipeline_cfg.source.type} {pipeline_cfg.source.path}")
    console.print(f"Output: {pipeline_cfg.output_dir}")


@app.command()
def schema(module: str = typer.Argument(..., help="Stage module, e.g. plystream.stages.write_ply_custom")) -> None:
    """Print the JSON schema of a stage's config."""
    from plystream.core.pipeline_runner import import_stage_class

    try:
        stage_cls = import_stage_class(module)
    except ImportError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    console.print_json(json.dumps(stage_cls.get_config_schema()))


if __name__ == "__main__":
    app()
