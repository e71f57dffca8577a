# Overview: Flask CLI command groups for inspecting seed data and printing reports.

# backend/dishooom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to dishooom (PowerShell: $env:FLASK_APP="dishooom").
# - Use: python -m flask <group> <command> [options]
#
# Data inspection (stores are rebuilt from seed JSON on every start):
# - python -m flask data counts
#   Record count per store.
# - python -m flask data low-stock
#   Products at or below their reorder threshold.
#
# Reports:
# - python -m flask reports show sales --start 2026-10-01 --end 2026-10-31
#   Print metrics, table and summary for a report kind.
# - python -m flask reports show inventory --csv
#   Print the report table as CSV.

import json

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import stores
from .services import reporting_service, settings_service
from .services.reporting_service import REPORT_KINDS, ReportError


@click.group('data')
def data_group():
    """Seed data inspection commands."""


@data_group.command('counts')
@with_appcontext
def data_counts():
    """Show how many records each store holds."""
    counts = stores.registry.counts()
    click.echo("\n" + "=" * 40)
    click.echo(f"{'Store':<20} {'Records':>10}")
    click.echo("=" * 40)
    for name, count in counts.items():
        click.echo(f"{name:<20} {count:>10}")
    click.echo("=" * 40 + "\n")


@data_group.command('low-stock')
@with_appcontext
def data_low_stock():
    """List products whose currentStock is at or below minStock."""
    products = stores.products.low_stock_products()
    if not products:
        click.echo("PASS All products are adequately stocked.")
        return

    click.echo("\n" + "=" * 70)
    click.echo(f"{'ID':<5} {'Name':<35} {'Stock':>8} {'Min':>8} {'Unit':<10}")
    click.echo("=" * 70)
    for p in products:
        click.echo(
            f"{p['Id']:<5} {str(p.get('name', '')):<35} "
            f"{p.get('currentStock', 0):>8} {p.get('minStock', 0):>8} {str(p.get('unit', '')):<10}"
        )
    click.echo("=" * 70 + "\n")


@click.group('reports')
def reports_group():
    """Report commands."""


@reports_group.command('show')
@click.argument('kind', type=click.Choice(REPORT_KINDS))
@click.option('--start', help='Interval start (ISO-8601)')
@click.option('--end', help='Interval end (ISO-8601; a bare date covers the whole day)')
@click.option('--csv', 'as_csv', is_flag=True, help='Print only the report table as CSV')
@click.option('--json', 'as_json', is_flag=True, help='Print the full report as JSON')
@with_appcontext
def show_report(kind, start, end, as_csv, as_json):
    """Build a report from the seeded stores and print it."""
    code = settings_service.currency_code(current_app.config["SETTINGS_PATH"])
    try:
        start_dt, end_dt = reporting_service.parse_range(start, end)
        report = reporting_service.generate_report(
            stores.registry,
            kind,
            start_dt,
            end_dt,
            currency=reporting_service.currency_symbol(code),
        )
    except ReportError as e:
        raise click.UsageError(str(e))

    if as_csv:
        click.echo(reporting_service.report_to_csv(report), nl=False)
        return
    if as_json:
        click.echo(json.dumps(report, indent=2, ensure_ascii=False))
        return

    click.echo("\n" + "=" * 60)
    for metric in report["metrics"]:
        trend = f" ({metric['trend']} {metric['trendValue']})" if metric["trendValue"] else ""
        click.echo(f"{metric['title']:<25} {metric['value']}{trend}")
    click.echo("=" * 60)

    table = report.get("tableData")
    if table:
        click.echo(f"\n{report['tableTitle']}")
        click.echo(" | ".join(table["headers"]))
        for row in table["rows"]:
            click.echo(" | ".join(str(cell) for cell in row))

    click.echo("\n" + report["summary"] + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(data_group)
    app.cli.add_command(reports_group)
