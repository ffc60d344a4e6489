# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/retailpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the settings row with defaults.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Inventory inspection:
# - python -m flask products low-stock
#   List out-of-stock and low-stock products against the current thresholds.
#
# Customer inspection:
# - python -m flask customers list [--search alice]
#   List customers with their loyalty balances.

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import customers_service
from .services.settings_service import get_settings
from .services.stock_service import stock_notifications


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create tables and the settings singleton (safe to re-run)."""
    db.create_all()
    settings = get_settings()
    click.echo(
        "PASS Initialized: thresholds low={} moderate={} high={}, loyalty {} ({} pts/$)".format(
            settings.low_stock_threshold,
            settings.moderate_stock_threshold,
            settings.high_stock_threshold,
            "enabled" if settings.loyalty_points_enabled else "disabled",
            settings.loyalty_points_per_dollar,
        )
    )


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('products')
def products_group():
    """Inventory inspection commands."""


@products_group.command('low-stock')
@with_appcontext
def low_stock():
    """List out-of-stock and low-stock products."""
    report = stock_notifications()

    if not report["count"]:
        click.echo(f"PASS No products below the low threshold ({report['low_stock_threshold']}).")
        return

    for p in report["out_of_stock"]:
        click.echo(f"OUT   #{p['id']:<5} {p['name']}")
    for p in report["low_stock"]:
        click.echo(f"LOW   #{p['id']:<5} {p['name']} (qty {p['quantity']} < {report['low_stock_threshold']})")


@click.group('customers')
def customers_group():
    """Customer inspection commands."""


@customers_group.command('list')
@click.option('--search', default=None, help='Name substring filter')
@with_appcontext
def list_customers(search):
    """List customers with loyalty balances."""
    customers = customers_service.list_customers(search=search)
    if not customers:
        click.echo("No customers found.")
        return

    for c in customers:
        click.echo(
            f"#{c.id:<5} {c.name:<30} card={c.card_number or '-':<12} "
            f"points={c.loyalty_points} spent=${c.total_spent_cents / 100:,.2f}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(products_group)
    app.cli.add_command(customers_group)
