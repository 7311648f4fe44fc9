"""Command-line interface for the decade market summary.

Usage:
    decade-stats summary data/stocks
    decade-stats summary data/stocks --workers 8 --config config/default.yaml
    decade-stats files data/stocks
"""

import logging
from typing import Optional

import typer

from .config import SummaryConfig, load_config
from .ingest.csv_reader import CsvReader, FileOpenError
from .ingest.file_scanner import DirectoryError, FileScanner

app = typer.Typer(
    name="decade-stats",
    help="Decade-bucketed market statistics over a directory of price files",
    add_completion=False,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _configure_logging(log_level: str) -> None:
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level '{log_level}'. Choose from {', '.join(LOG_LEVELS)}")
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s %(message)s")


def _load_config(config: Optional[str], workers: Optional[int]) -> SummaryConfig:
    """Load settings, mapping invalid values to a usage error."""
    try:
        return load_config(config, workers=workers)
    except FileNotFoundError:
        raise typer.BadParameter(f"Config file not found: {config}")
    except (ValueError, TypeError) as e:
        raise typer.BadParameter(str(e))


@app.command()
def summary(
    directory: str = typer.Argument(..., help="Directory of per-instrument CSV files"),
    workers: Optional[int] = typer.Option(
        None,
        "--workers", "-w",
        help="Worker threads (default: one per CPU)",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config", "-c",
        help="Path to YAML configuration file",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    """Print mean price, volatility and returns for every decade."""
    from .engine import run_summary
    from .reporting import print_report

    _configure_logging(log_level)
    cfg = _load_config(config, workers)

    try:
        result = run_summary(directory, cfg)
    except DirectoryError:
        typer.echo(f"Err: {directory}", err=True)
        raise typer.Exit(code=1)

    print_report(result.decades, result.total_calc_seconds, echo=typer.echo)


@app.command()
def files(
    directory: str = typer.Argument(..., help="Directory of per-instrument CSV files"),
    suffix: str = typer.Option(".csv", "--suffix", help="File suffix to match"),
):
    """Show which files a summary run would process."""
    scanner = FileScanner(directory, suffix=suffix)
    try:
        stats = scanner.get_file_stats()
    except DirectoryError:
        typer.echo(f"Err: {directory}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"\nData in {stats['directory']}:")
    typer.echo(f"  Files: {stats['file_count']}")
    typer.echo(f"  Size: {stats['total_size_mb']:.1f} MB")

    instruments = stats["instruments"]
    if instruments:
        typer.echo(f"  First: {instruments[0]}, Last: {instruments[-1]}")

    reader = CsvReader()
    for data_file in scanner.scan():
        try:
            file_stats = reader.get_file_stats(data_file.path)
        except FileOpenError:
            typer.echo(f"  {data_file.filename}: unreadable")
            continue
        rows = file_stats["row_count"]
        if rows == 0:
            typer.echo(f"  {data_file.filename}: 0 rows")
        else:
            typer.echo(
                f"  {data_file.filename}: {rows} rows, "
                f"{file_stats['first_date']} to {file_stats['last_date']}"
            )


def main() -> None:
    """Entrypoint for the console script."""
    app()


if __name__ == "__main__":
    main()
