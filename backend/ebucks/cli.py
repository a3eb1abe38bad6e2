# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/ebucks/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables and the bootstrap admin (TEACHER / PIN 0000) if no user exists.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Vouchers:
# - python -m flask vouchers mint --amount 20 [--user-id 3]
#   Mint a voucher outside the API.
# - python -m flask vouchers show AB12CD34
#   Print a voucher's state.
#
# Payroll:
# - python -m flask payroll run
#   Pay every closed, unpaid timesheet.
#
# Users:
# - python -m flask users list [--all]
# - python -m flask users create --name Ada --role Employee --pin 4821 --rate 15
#   Create a user (prompts if options are omitted).

import click
from flask.cli import with_appcontext

from .extensions import db
from .money import format_cents
from .services import auth_service, ledger_service, payroll_service
from .validation import ValidationError, ConflictError, NotFoundError, to_cents


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the E-Bucks database.

    Creates:
    - All tables (idempotent)
    - Bootstrap admin TEACHER with PIN 0000, only when no user exists

    SECURITY: Change the bootstrap PIN immediately!
    """
    click.echo("START Initializing E-Bucks...")
    db.create_all()

    admin = auth_service.ensure_bootstrap_admin()
    if admin:
        click.echo(f"PASS Created bootstrap admin: {admin.name} (ID: {admin.id}, PIN: 0000)")
    else:
        click.echo("PASS Users already exist; bootstrap admin skipped")

    click.echo("DONE Initialization complete.")


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


@click.group('vouchers')
def vouchers_group():
    """Voucher inspection and minting."""


@vouchers_group.command('mint')
@click.option('--amount', required=True, help='Face value in currency units, e.g. 20 or 12.50')
@click.option('--user-id', type=int, default=None, help='Owner (omit for a bearer voucher)')
@with_appcontext
def mint_voucher(amount, user_id):
    """Mint a voucher with no funding source."""
    try:
        result = payroll_service.mint(amount_cents=to_cents(amount), user_id=user_id)
    except (ValidationError, NotFoundError) as e:
        raise click.ClickException(str(e))

    v = result.voucher
    click.echo(f"PASS Minted {v.id} for {format_cents(v.amount_cents)} (owner: {v.owner_id or 'bearer'})")


@vouchers_group.command('show')
@click.argument('voucher_id')
@with_appcontext
def show_voucher(voucher_id):
    """Print one voucher's state."""
    v = ledger_service.get_voucher(voucher_id)
    if not v:
        raise click.ClickException(f"Voucher {voucher_id} not found")

    status = "USED" if v.is_used else "UNUSED"
    click.echo(f"{v.id}  {format_cents(v.amount_cents):>10}  {status:<6}  source={v.source}  owner={v.owner_id or '-'}")
    click.echo(f"  created: {v.created_at}")
    if v.used_at:
        click.echo(f"  used:    {v.used_at}")


@click.group('payroll')
def payroll_group():
    """Payroll commands."""


@payroll_group.command('run')
@with_appcontext
def run_payroll():
    """Pay every closed, unpaid timesheet."""
    run = payroll_service.process_payroll()

    if not run.paid and not run.failed:
        click.echo("No unpaid timesheets.")
        return

    for d in run.paid:
        click.echo(
            f"PASS {d.user_name:<20} {d.total_minutes / 60:>6.2f}h  "
            f"{format_cents(d.amount_cents):>10}  voucher={d.voucher_id or '-'}"
        )
    for f in run.failed:
        click.echo(f"FAIL user {f['user_id']}: {f['error']}", err=True)

    click.echo(f"DONE Paid {run.count} user(s), {len(run.failed)} failed.")


@click.group('users')
def users_group():
    """User inspection and bootstrap."""


@users_group.command('list')
@click.option('--all', 'include_inactive', is_flag=True, help='Include deactivated users')
@with_appcontext
def list_users(include_inactive):
    """List users with role, rate and balance."""
    users = auth_service.list_users(include_inactive=include_inactive)
    if not users:
        click.echo("No users found.")
        return

    click.echo(f"{'ID':<5} {'Name':<20} {'Role':<10} {'Rate':>8} {'Balance':>10} Active")
    click.echo("-" * 62)
    for u in users:
        balance = ledger_service.voucher_balance(u.id)
        click.echo(
            f"{u.id:<5} {u.name:<20} {u.role:<10} {format_cents(u.hourly_rate_cents):>8} "
            f"{format_cents(balance):>10} {'yes' if u.is_active else 'no'}"
        )


@users_group.command('create')
@click.option('--name', prompt=True)
@click.option('--role', type=click.Choice(['Admin', 'Employee'], case_sensitive=False), default='Employee', show_default=True)
@click.option('--pin', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--rate', default=None, help='Hourly rate in currency units')
@with_appcontext
def create_user_cmd(name, role, pin, rate):
    """Create a user."""
    try:
        user = auth_service.create_user(name=name, role=role, pin=pin, hourly_rate=rate)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user {user.name} (ID: {user.id}, role: {user.role})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(vouchers_group)
    app.cli.add_command(payroll_group)
    app.cli.add_command(users_group)
