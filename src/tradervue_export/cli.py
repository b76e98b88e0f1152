"""CLI entry point for the exporter."""

from __future__ import annotations

import sys
from datetime import datetime

import click

from . import __version__
from .core.errors import ExportError

_DATE = click.DateTime(formats=["%Y-%m-%d"])


@click.group()
def main() -> None:
    """tvue - Tradervue trade exporter & analyzer.

    Export all your trades from Tradervue incrementally and generate daily
    summaries.
    """


@main.command()
@click.option("--username", "-u", default=None, help="Tradervue username")
@click.option("--password", "-p", default=None, help="Tradervue password")
@click.option("--data-dir", "-d", default=None, help="Data directory (default: ./data)")
@click.option("--from", "from_date", type=_DATE, default=None, help="Start date (yyyy-mm-dd)")
@click.option("--to", "to_date", type=_DATE, default=None, help="End date (yyyy-mm-dd)")
@click.option("--with-executions", is_flag=True, help="Fetch individual executions per trade (slower)")
@click.option("--force", is_flag=True, help="Re-export existing dates")
@click.option("--config", default=None, type=click.Path(dir_okay=False), help="TOML config file")
def export(
    username: str | None,
    password: str | None,
    data_dir: str | None,
    from_date: datetime | None,
    to_date: datetime | None,
    with_executions: bool,
    force: bool,
    config: str | None,
) -> None:
    """Export trades from the Tradervue API."""
    from .export import ExportOptions, ExportStatus
    from .main import bootstrap, run_export

    try:
        settings = bootstrap(
            config_path=config,
            overrides={"username": username, "password": password, "data_dir": data_dir},
        )
        result = run_export(
            settings,
            ExportOptions(
                start=from_date.date() if from_date else None,
                end=to_date.date() if to_date else None,
                with_executions=with_executions,
                force=force,
            ),
        )
    except ExportError as exc:
        click.echo(f"Export failed: {exc}", err=True)
        sys.exit(1)

    if result.status == ExportStatus.UP_TO_DATE:
        click.echo("Already up to date. No new trades to export.")
    elif result.status == ExportStatus.NO_TRADES:
        click.echo("No trades found in the date range.")
    else:
        click.echo(f"Export complete: {result.days} days, {result.trades} trades")
        if result.enrichment_failures:
            click.echo(
                f"Warning: {result.enrichment_failures} day(s) saved without executions",
                err=True,
            )


@main.command()
@click.option("--data-dir", "-d", default="./data", help="Data directory")
@click.option("--from", "from_date", type=_DATE, default=None, help="Start date filter (yyyy-mm-dd)")
@click.option("--to", "to_date", type=_DATE, default=None, help="End date filter (yyyy-mm-dd)")
@click.option("--csv", "as_csv", is_flag=True, help="Output as CSV")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False), help="Output file (default: stdout)")
def summary(
    data_dir: str,
    from_date: datetime | None,
    to_date: datetime | None,
    as_csv: bool,
    output: str | None,
) -> None:
    """Show daily trade summaries from exported data."""
    from .main import run_summary
    from .summary import render_table, write_csv

    summaries = run_summary(
        data_dir,
        from_date.date() if from_date else None,
        to_date.date() if to_date else None,
    )
    if not summaries:
        click.echo("No exported data found. Run 'tvue export' first.", err=True)
        return

    with click.open_file(output or "-", "w", encoding="utf-8") as out:
        if as_csv:
            write_csv(out, summaries)
        else:
            out.write(render_table(summaries))


@main.command()
def version() -> None:
    """Print version."""
    click.echo(f"tvue v{__version__}")
