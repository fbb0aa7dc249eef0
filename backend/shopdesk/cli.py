# Overview: Flask CLI command groups for inspecting permissions, stock and balances.

# backend/shopdesk/cli.py
# Commands Legend (run from the backend directory):
# - python -m flask --app shopdesk perms list [--role SALES] [--category REPAIRS]
#   List permissions (optionally filtered by role or category).
# - python -m flask --app shopdesk perms check tech DIAGNOSE_REPAIR
#   Check whether a staff member has a permission.
# - python -m flask --app shopdesk perms transitions
#   Show which permission each repair status change requires.
# - python -m flask --app shopdesk reports stock
#   Print the import / export / on-hand report.
# - python -m flask --app shopdesk ledger check
#   Compare every party balance with the sum of its open records.
#
# The store lives in memory, so these commands inspect the state a fresh
# app starts from (seed data unless SHOPDESK_SEED_MOCK_DATA is off).

import click
from flask.cli import with_appcontext

from .extensions import get_store
from .models import Role
from .permissions import PERMISSION_DEFINITIONS, get_permissions_by_category, role_permissions
from .services import ledger_service, permission_service, reporting_service
from .services.lifecycle_service import TRANSITION_PERMISSIONS


@click.group('perms')
def perms_group():
    """Permission inspection commands."""


@perms_group.command('list')
@click.option('--role', help='Filter by role (ADMIN, TECHNICIAN, SALES)')
@click.option('--category', help='Filter by category')
@with_appcontext
def list_permissions_cli(role, category):
    """List all permissions, optionally filtered by role or category."""
    if role:
        role = role.upper()
        if role not in Role.all():
            click.echo(f"FAIL Role '{role}' not found")
            return

        codes = role_permissions(role)
        perms = [p for p in PERMISSION_DEFINITIONS if p[0] in codes]

        click.echo(f"\n{'='*80}")
        click.echo(f"Permissions for role: {role}")
        click.echo(f"{'='*80}\n")

        click.echo(f"{'Code':<30} {'Name':<35} {'Category'}")
        click.echo("-"*80)
        for code, name, _, perm_category in perms:
            click.echo(f"{code:<30} {name:<35} {perm_category}")

        click.echo(f"\n Total: {len(perms)} permissions\n")

    elif category:
        perms = get_permissions_by_category(category.upper())

        click.echo(f"\n{'='*80}")
        click.echo(f"Permissions in category: {category.upper()}")
        click.echo(f"{'='*80}\n")

        click.echo(f"{'Code':<30} {'Name'}")
        click.echo("-"*80)
        for code, name, _, _ in perms:
            click.echo(f"{code:<30} {name}")

        click.echo(f"\n Total: {len(perms)} permissions\n")

    else:
        click.echo(f"\n{'='*80}")
        click.echo("All Permissions")
        click.echo(f"{'='*80}\n")

        current_category = None
        for code, name, _, perm_category in sorted(PERMISSION_DEFINITIONS, key=lambda p: (p[3], p[0])):
            if perm_category != current_category:
                if current_category:
                    click.echo("")
                click.echo(f"CATEGORY {perm_category}")
                click.echo("-"*80)
                current_category = perm_category
            click.echo(f"  {code:<28} {name}")

        click.echo(f"\n Total: {len(PERMISSION_DEFINITIONS)} permissions\n")


@perms_group.command('check')
@click.argument('username')
@click.argument('permission_code')
@with_appcontext
def check_permission_cli(username, permission_code):
    """Check if a staff member has a specific permission."""
    employee = next((e for e in get_store().employees if e.username == username), None)
    if not employee:
        click.echo(f"FAIL User '{username}' not found")
        return

    if permission_service.user_has_permission(employee, permission_code):
        click.echo(f"PASS User '{username}' HAS permission '{permission_code}'")
    else:
        click.echo(f"FAIL User '{username}' DOES NOT HAVE permission '{permission_code}'")

    click.echo(f"\nUser role: {employee.role}")
    click.echo(f"Total permissions: {len(permission_service.get_user_permissions(employee))}")


@perms_group.command('transitions')
def transitions_cli():
    """Show the permission required for each repair status change."""
    click.echo(f"{'From':<14} {'To':<14} {'Permission':<24} Roles")
    click.echo("-"*80)
    for (source, target), code in TRANSITION_PERMISSIONS.items():
        roles = [r for r in Role.all() if code in role_permissions(r)]
        click.echo(f"{source:<14} {target:<14} {code:<24} {', '.join(roles)}")


@click.group('reports')
def reports_group():
    """Read-only reports."""


@reports_group.command('stock')
@with_appcontext
def stock_report_cli():
    """Import / export / on-hand per goods product."""
    rows = reporting_service.stock_report(get_store())
    click.echo(f"{'SKU':<14} {'Name':<40} {'In':>6} {'Out':>6} {'Stock':>6}")
    click.echo("-"*80)
    for row in rows:
        click.echo(
            f"{row['sku']:<14} {row['name'][:40]:<40} "
            f"{row['total_imported']:>6} {row['total_exported']:>6} {row['current_stock']:>6}"
        )
    click.echo(f"\n Total: {len(rows)} products\n")


@click.group('ledger')
def ledger_group():
    """Debt ledger inspection."""


@ledger_group.command('check')
@with_appcontext
def ledger_check_cli():
    """Compare stored balances with the sum of open records."""
    store = get_store()
    mismatches = 0

    for customer in store.customers:
        expected = ledger_service.expected_customer_balance(store, customer.id)
        if expected != customer.balance:
            mismatches += 1
            click.echo(f"WARN Customer {customer.id}: stored {customer.balance}, expected {expected}")

    for supplier in store.suppliers:
        expected = ledger_service.expected_supplier_balance(store, supplier.id)
        if expected != supplier.balance:
            mismatches += 1
            click.echo(f"WARN Supplier {supplier.id}: stored {supplier.balance}, expected {expected}")

    if mismatches:
        click.echo(f"\nFAIL {mismatches} balance(s) out of step with their records")
    else:
        click.echo("PASS All party balances match their records")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(perms_group)
    app.cli.add_command(reports_group)
    app.cli.add_command(ledger_group)
