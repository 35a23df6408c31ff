from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import click

from rnaseq_deliverables.config import PipelineConfig
from rnaseq_deliverables.parsers.classifier import classify_file
from rnaseq_deliverables.pipeline import Upload, process_uploads

STATUS_MARKS = {"success": "✓", "warning": "⚠", "error": "✗"}


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose logging.")
def cli(verbose: bool) -> None:
    """CLI utilities for RNA-seq deliverable files."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


@cli.command("classify")
@click.argument("files", nargs=-1, required=True)
def classify_command(files: Iterable[str]) -> None:
    """Print the detected kind and comparison id of each file name."""
    for name in files:
        classification = classify_file(Path(name).name)
        group = classification.group_id or "-"
        click.echo(f"{Path(name).name}\t{classification.kind.value}\t{group}")


@cli.command("process")
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the merged dataset as JSON to this file (stdout if omitted).",
)
@click.option(
    "--workers",
    type=click.IntRange(1, 64),
    default=None,
    help="Number of parser threads (overrides RNASEQ_DELIVERABLES_MAX_WORKERS).",
)
def process_command(
    files: Iterable[Path],
    output: Optional[Path],
    workers: Optional[int],
) -> None:
    """Parse deliverable files and merge them into one project dataset."""
    config = PipelineConfig.from_env()
    if workers is not None:
        config.max_workers = workers

    uploads = [Upload.from_path(path) for path in files]
    result = process_uploads(uploads, config=config)
    payload = result.dataset.to_dict()

    if output is None:
        click.echo(json.dumps(payload, indent=2))
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)

    click.echo("\n" + "=" * 60, err=True)
    click.echo("PROCESSING SUMMARY", err=True)
    click.echo("=" * 60, err=True)
    for status in result.statuses:
        mark = STATUS_MARKS.get(status.status, "?")
        group = f" ({status.group_id})" if status.group_id else ""
        line = f"{mark} {status.name}: {status.kind.value}{group}"
        if status.message:
            line += f" - {status.message}"
        click.echo(line, err=True)
    click.echo(f"\nComparisons: {len(result.dataset.comparisons)}", err=True)
    if output is not None:
        click.echo(f"Dataset saved to: {output}", err=True)
    click.echo("=" * 60, err=True)

    if result.failed:
        raise SystemExit(1)


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
