"""
toho-catalog: extract the catalog snapshot from a local mirror of the library.

Usage:
  toho-catalog extract [OPTIONS]
  toho-catalog report [OPTIONS]

Examples:
  toho-catalog extract
  toho-catalog extract --html-root mirror/html/html --out toho-data.json -v
  toho-catalog extract --workers 8 -vv
  toho-catalog report --csv books.csv
"""

import logging
from pathlib import Path

import typer

from toho_catalog import run, settings
from toho_catalog.report import detailed_report, export_books_table, structure_samples
from toho_catalog.snapshot import read_snapshot

app = typer.Typer(help=__doc__, no_args_is_help=True)


def setup_logging(verbose: int):
    """Set up logging based on verbosity level."""
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # verbose >= 2
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def _print_report(dataset) -> None:
    for key, value in detailed_report(dataset).items():
        typer.echo(f"{key}: {value}")
    samples = structure_samples(dataset)
    if samples:
        typer.echo("")
        typer.echo("\n".join(samples))


@app.command("extract", help="Walk the catalog and write the snapshot JSON.")
def extract(
    html_root: Path = typer.Option(
        settings.HTML_ROOT, "--html-root", help="Root directory of the HTML mirror"
    ),
    root_listing: str = typer.Option(
        settings.ROOT_LISTING, "--root-listing", help="Root listing file name"
    ),
    out: Path = typer.Option(
        settings.SNAPSHOT_PATH, "--out", "-o", help="Snapshot JSON path"
    ),
    workers: int = typer.Option(
        1, "--workers", "-w", min=1, help="Threads resolving book structures"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Extract books and volumes, then aggregate and save the snapshot."""
    setup_logging(verbose)

    dataset = run(html_root, out, root_listing, workers=workers)

    typer.echo(
        f"Extracted {dataset.metadata.total_books} books, "
        f"{dataset.metadata.total_volumes} volumes -> {out}"
    )
    _print_report(dataset)


@app.command("report", help="Summarize an existing snapshot.")
def report(
    snapshot: Path = typer.Option(
        settings.SNAPSHOT_PATH, "--snapshot", "-s", help="Snapshot JSON path"
    ),
    csv: Path = typer.Option(
        None, "--csv", help="Also write a per-book CSV table to this path"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Print the detailed report for a snapshot written by `extract`."""
    setup_logging(verbose)
    dataset = read_snapshot(snapshot)
    _print_report(dataset)
    if csv is not None:
        export_books_table(dataset, csv)
        logging.info(f"Wrote book table to {csv}")


if __name__ == "__main__":
    app()
