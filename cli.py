'''
To Run:
python -m rentmate.cli tenants add "Ravi Kumar" 9876543210 --rent 5000 --water 200 --room "Room 101"
python -m rentmate.cli bill <tenant-id> --units 10 --extra 50 --record
'''
import click
import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List

from rentmate.datatypes import BillData, OwnerInfo, PaymentRecord
from rentmate.service import BillingService


def _money_option(ctx, param, value):
    """Parse a non-negative amount; None passes through for optional options."""
    if value is None:
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise click.BadParameter(f'{value!r} is not a number')
    if not amount.is_finite() or amount < 0:
        raise click.BadParameter('must be a non-negative amount')
    return amount


def _mobile_argument(ctx, param, value):
    if value is None:
        return None
    digits = re.sub(r'\s', '', value)
    if not re.fullmatch(r'\d{10}', digits):
        raise click.BadParameter('enter a valid 10-digit number')
    return digits


def _name_argument(ctx, param, value):
    if value is None:
        return None
    if not value.strip():
        raise click.BadParameter('name is required')
    return value.strip()


def _date_option(ctx, param, value):
    if value is None:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        raise click.BadParameter('use YYYY-MM-DD')


def format_bill_summary(bill: BillData, owner: OwnerInfo, phone: str) -> str:
    """
    Format a bill as plain text lines for the terminal.
    """
    lines = []
    lines.append(f"=== BILL FOR {bill.tenant_name.upper()} ===")
    if bill.room_number:
        lines.append(f"Room: {bill.room_number}")
    lines.append(f"Billing month: {bill.billing_date:%B %Y}")
    lines.append("")
    lines.append(f"Room Rent:           ₹{bill.monthly_rent:.2f}")
    lines.append(f"Electricity Used:    {bill.electricity_units} units @ ₹{bill.electricity_rate}")
    lines.append(f"Electricity Charges: ₹{bill.electricity_charges:.2f}")
    lines.append(f"Water Bill:          ₹{bill.water_bill:.2f}")
    if bill.extra_charges != 0:
        lines.append(f"Extra Charges:       ₹{bill.extra_charges:.2f}")
    lines.append("")
    lines.append(f"Total Payable:       ₹{bill.total_amount:.2f}")

    if owner.name or owner.upi_id or owner.mobile_number:
        lines.append("")
        if owner.name:
            lines.append(f"Owner: {owner.name}")
        if owner.upi_id:
            lines.append(f"UPI ID: {owner.upi_id}")
        if owner.mobile_number:
            lines.append(f"Mobile: {owner.mobile_number}")

    lines.append("")
    lines.append(f"Send to: +{phone}")
    return "\n".join(lines)


def format_history(records: List[PaymentRecord]) -> str:
    if not records:
        return "No payment history found."
    return "\n".join(
        f"{r.date:%d %b %Y}  {r.billing_month:<16} ₹{r.amount:>10.2f}  {r.id}"
        for r in records
    )


def _get_tenant_or_fail(service: BillingService, tenant_id: str):
    tenant = service.directory.get(tenant_id)
    if tenant is None:
        raise click.ClickException(f'No tenant with id {tenant_id}')
    return tenant


@click.group()
@click.option('--store', type=click.Path(path_type=Path), default=None,
              help='Path to the JSON store (defaults to the configured path)')
@click.option('-v', '--verbose', is_flag=True, help='Show info-level logging')
@click.pass_context
def main(ctx, store, verbose):
    """Keep tenants, prepare monthly rent bills and track payments."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')
    ctx.obj = BillingService.open(store)


# ---------------------------------------------------------------- tenants

@main.group()
def tenants():
    """Add, edit and remove tenants."""


@tenants.command('list')
@click.pass_obj
def list_tenants(service: BillingService):
    if not len(service.directory):
        click.echo("No tenants yet.")
        return
    for t in service.directory.tenants:
        room = f" [{t.room_number}]" if t.room_number else ""
        click.echo(f"{t.id}  {t.name}{room}  {t.mobile_number}  ₹{t.monthly_rent}/mo  water ₹{t.water_bill}")


@tenants.command('add')
@click.argument('name', callback=_name_argument)
@click.argument('mobile', callback=_mobile_argument)
@click.option('--rent', required=True, callback=_money_option, help='Monthly rent')
@click.option('--water', required=True, callback=_money_option, help='Monthly water bill')
@click.option('--room', default='', help='Room / flat number')
@click.pass_obj
def add_tenant(service: BillingService, name, mobile, rent, water, room):
    tenant = service.directory.add(name=name, mobile_number=mobile, monthly_rent=rent,
                                   water_bill=water, room_number=room)
    click.echo(f"✔ Added {tenant.name} ({tenant.id})")


@tenants.command('update')
@click.argument('tenant_id')
@click.option('--name', callback=_name_argument, help='New name')
@click.option('--mobile', callback=_mobile_argument, help='New 10-digit mobile number')
@click.option('--rent', callback=_money_option, help='New monthly rent')
@click.option('--water', callback=_money_option, help='New monthly water bill')
@click.option('--room', help='New room / flat number')
@click.pass_obj
def update_tenant(service: BillingService, tenant_id, name, mobile, rent, water, room):
    _get_tenant_or_fail(service, tenant_id)
    changes = {
        'name': name,
        'mobile_number': mobile,
        'monthly_rent': rent,
        'water_bill': water,
        'room_number': room,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        raise click.UsageError('Nothing to update')
    service.directory.update(tenant_id, **changes)
    click.echo(f"✔ Updated {', '.join(changes)}")


@tenants.command('remove')
@click.argument('tenant_id')
@click.confirmation_option(prompt='Delete this tenant and their payment history?')
@click.pass_obj
def remove_tenant(service: BillingService, tenant_id):
    tenant = _get_tenant_or_fail(service, tenant_id)
    service.directory.delete(tenant_id)
    click.echo(f"✔ Removed {tenant.name}")


# ---------------------------------------------------------------- owner

@main.group()
def owner():
    """Owner details printed at the bottom of every bill."""


@owner.command('show')
@click.pass_obj
def show_owner(service: BillingService):
    info = service.owner.get()
    click.echo(f"Name:   {info.name}")
    click.echo(f"Mobile: {info.mobile_number}")
    click.echo(f"UPI ID: {info.upi_id}")


@owner.command('set')
@click.option('--name', help='Owner name')
@click.option('--mobile', help='Owner mobile number')
@click.option('--upi', help='UPI id for payments')
@click.pass_obj
def set_owner(service: BillingService, name, mobile, upi):
    # read-modify-write: the store only takes whole OwnerInfo values
    info = service.owner.get()
    if name is not None:
        info.name = name
    if mobile is not None:
        info.mobile_number = mobile
    if upi is not None:
        info.upi_id = upi
    service.owner.set(info)
    click.echo("✔ Owner info saved")


# ---------------------------------------------------------------- bill

@main.command()
@click.argument('tenant_id')
@click.option('--units', default='0', callback=_money_option, help='Electricity units used this cycle')
@click.option('--extra', default='0', callback=_money_option, help='Extra charges this cycle')
@click.option('--date', 'billing_date', callback=_date_option, help='Billing date (YYYY-MM-DD), defaults to today')
@click.option('--record', is_flag=True, help='Save the bill to the tenant\'s payment history')
@click.option('--month', default=None, help='Billing month label for the history (defaults to "<Month> <Year>")')
@click.pass_obj
def bill(service: BillingService, tenant_id, units, extra, billing_date, record, month):
    """Prepare the bill for one tenant and print it."""
    tenant = _get_tenant_or_fail(service, tenant_id)

    session = service.session
    session.select_tenant(tenant_id)
    session.set_electricity_units(units)
    session.set_extra_charges(extra)
    if billing_date is not None:
        session.set_billing_date(billing_date)

    bill_data = session.generate_bill_data()
    click.echo(format_bill_summary(bill_data, service.owner.get(), service.reminder_phone(tenant)))

    if record:
        payment = service.finalize_bill(month)
        click.echo(f"\n💰 Recorded {payment.billing_month} (₹{payment.amount:.2f}) as {payment.id}")


# ---------------------------------------------------------------- history

@main.group()
def history():
    """Look at, prune and export payment history."""


@history.command('show')
@click.argument('tenant_id')
@click.pass_obj
def show_history(service: BillingService, tenant_id):
    _get_tenant_or_fail(service, tenant_id)
    click.echo(format_history(service.directory.history(tenant_id)))


@history.command('delete')
@click.argument('tenant_id')
@click.argument('record_id')
@click.pass_obj
def delete_history(service: BillingService, tenant_id, record_id):
    tenant = _get_tenant_or_fail(service, tenant_id)
    if not any(p.id == record_id for p in tenant.payment_history):
        raise click.ClickException(f'No payment record {record_id} for {tenant.name}')
    service.directory.delete_payment_record(tenant_id, record_id)
    click.echo(f"✔ Deleted payment record {record_id}")


@history.command('export')
@click.argument('tenant_id')
@click.argument('csv_path', type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def export_history(service: BillingService, tenant_id, csv_path):
    _get_tenant_or_fail(service, tenant_id)
    count = service.export_history(tenant_id, csv_path)
    click.echo(f"✔ Exported {count} records to {csv_path}")


if __name__ == '__main__':
    main()
