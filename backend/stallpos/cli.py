# Overview: Flask CLI command groups for bootstrap, catalog maintenance and ledger inspection.

# backend/stallpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables and save the seeded catalog and empty histories if nothing is saved yet.
# - python -m flask system reset --yes
#   Delete ALL saved sales, payouts and catalog data (catalog returns to the seed).
#
# Catalog:
# - python -m flask catalog list [--origin Vendor]
# - python -m flask catalog import items.csv
#   Import vendor,name,sellingPrice,costPrice,stock[,category] rows (header ignored).
# - python -m flask catalog export > catalog.csv
#
# Ledger:
# - python -m flask ledger cash
# - python -m flask ledger vendors
# - python -m flask ledger reconcile --date 2026-10-19 --counted 48.00
# - python -m flask ledger report --period 2026-10 [--csv]

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import export_service, import_service, ledger_service, reporting_service, snapshot_service
from .services.snapshot_service import KEY_CATALOG, SNAPSHOT_KEYS
from .time_utils import local_date, parse_iso_date, resolve_timezone, utcnow
from .validation import ValidationError, format_cents, parse_cents


def _tz():
    return resolve_timezone(current_app.config["STALL_TIMEZONE"])


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create the snapshots table and save defaults for any missing snapshot."""
    click.echo("START Initializing stall ledger...")
    db.create_all()

    existing = {row["key"] for row in snapshot_service.snapshot_status() if row["updated_at"]}
    missing = [key for key in SNAPSHOT_KEYS if key not in existing]
    if not missing:
        click.echo("PASS All snapshots already exist, nothing to do")
        return

    state = snapshot_service.get_state()
    snapshot_service.save_state(state, missing)
    for key in missing:
        click.echo(f"PASS Saved default snapshot: {key}")
    click.echo("DONE Stall ledger initialized")


@system_group.command('reset')
@click.option('--yes', is_flag=True, help='Confirm deletion of all saved data')
@with_appcontext
def reset_system(yes):
    """Delete all saved sales, payouts and catalog data."""
    if not yes:
        click.echo("FAIL This deletes ALL sales, payouts and inventory. Re-run with --yes to confirm.")
        raise SystemExit(1)
    removed = snapshot_service.reset_state()
    snapshot_service.forget_state()
    click.echo(f"PASS Removed {removed} snapshot(s); catalog will start from the seed")


@click.group('catalog')
def catalog_group():
    """Catalog inspection and import."""


@catalog_group.command('list')
@click.option('--origin', type=click.Choice(['Internal', 'Vendor']), default=None)
@with_appcontext
def list_catalog(origin):
    state = snapshot_service.get_state()
    items = [item for item in state.catalog if not origin or item.origin == origin]
    if not items:
        click.echo("No items found.")
        return
    for item in items:
        click.echo(
            f"{item.id:<24} {item.origin:<8} {item.vendor_name:<16} {item.name:<24} "
            f"RM {format_cents(item.selling_price_cents):>8}  stock {item.stock_count}"
        )


@catalog_group.command('import')
@click.argument('path', type=click.File('r', encoding='utf-8'))
@with_appcontext
def import_catalog(path):
    """Import items from a catalog CSV file."""
    rows = import_service.parse_catalog_csv(path.read())
    state = snapshot_service.get_state()
    result = state.catalog.import_items(rows)
    if not result.accepted:
        if result.submitted:
            click.echo("FAIL No valid rows found. Expected: vendor,name,sellingPrice,costPrice,stock[,category]")
        else:
            click.echo("FAIL The file has no rows after the header")
        raise SystemExit(1)

    snapshot_service.commit_state(state, [KEY_CATALOG])
    click.echo(f"PASS Imported {result.accepted} item(s), skipped {result.skipped}")


@catalog_group.command('export')
@with_appcontext
def export_catalog():
    click.echo(export_service.catalog_csv(snapshot_service.get_state().catalog), nl=False)


@click.group('ledger')
def ledger_group():
    """Cash and vendor ledger figures."""


@ledger_group.command('cash')
@with_appcontext
def cash_command():
    state = snapshot_service.get_state()
    click.echo(f"Cash in hand: RM {format_cents(ledger_service.cash_in_hand(state.sales, state.payouts))}")


@ledger_group.command('vendors')
@with_appcontext
def vendors_command():
    state = snapshot_service.get_state()
    rows = ledger_service.vendor_ledger(state.sales, state.payouts)
    if not rows:
        click.echo("No vendor activity.")
        return
    click.echo(f"{'Vendor':<20} {'Owed':>10} {'Paid':>10} {'Balance':>10}")
    for row in rows:
        click.echo(
            f"{row['name']:<20} {format_cents(row['owed_cents']):>10} "
            f"{format_cents(row['paid_cents']):>10} {format_cents(row['balance_cents']):>10}"
        )


@ledger_group.command('reconcile')
@click.option('--date', 'day', default=None, help='YYYY-MM-DD (default: today)')
@click.option('--counted', default=None, help='Counted cash in ringgit, e.g. 48.50')
@with_appcontext
def reconcile_command(day, counted):
    """Compare expected drawer cash with a physical count."""
    tz = _tz()
    try:
        parsed_day = parse_iso_date(day) or local_date(utcnow(), tz)
        counted_cents = parse_cents(counted, field="counted") if counted else None
    except (ValueError, ValidationError) as e:
        raise click.BadParameter(str(e))

    state = snapshot_service.get_state()
    report = ledger_service.daily_cash_reconciliation(state.sales, parsed_day, counted_cents, tz=tz)
    click.echo(f"Date: {report['date']}  ({report['transaction_count']} sales)")
    click.echo(f"Expected cash: RM {format_cents(report['expected_cash_cents'])}")
    click.echo(f"E-wallet:      RM {format_cents(report['by_payment_method']['EWallet'])}")
    if report["variance_cents"] is not None:
        click.echo(f"Counted cash:  RM {format_cents(report['counted_cash_cents'])}")
        click.echo(f"Variance:      RM {format_cents(report['variance_cents'])} ({report['status']})")


@ledger_group.command('report')
@click.option('--period', required=True, help='YYYY-MM')
@click.option('--csv', 'as_csv', is_flag=True, help='Print CSV instead of a table')
@with_appcontext
def report_command(period, as_csv):
    """Monthly vendor payables."""
    state = snapshot_service.get_state()
    try:
        report = reporting_service.period_vendor_report(state.sales, period)
    except reporting_service.ReportError as e:
        raise click.BadParameter(str(e))

    if as_csv:
        click.echo(export_service.vendor_report_csv(report), nl=False)
        return
    for row in report["rows"]:
        click.echo(
            f"{row['vendor']:<20} {row['units']:>6} "
            f"{format_cents(row['gross_sales_cents']):>10} {format_cents(row['payable_cents']):>10}"
        )
    click.echo(
        f"{'TOTAL':<20} {report['total_units']:>6} "
        f"{format_cents(report['total_gross_sales_cents']):>10} {format_cents(report['total_payable_cents']):>10}"
    )


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(ledger_group)
