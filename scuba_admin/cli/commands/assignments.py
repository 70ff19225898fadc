"""Booking equipment (assignment) commands."""

import datetime as dt
import sys
from typing import Optional, Tuple

import click

from scuba_admin.calculators.schedule import default_return_date
from scuba_admin.calculators.time_utils import format_api_date
from scuba_admin.cli.context import (
    CliContext,
    confirm_delete,
    echo_empty,
    json_option,
    pass_cli,
    yes_option,
)
from scuba_admin.cli.error_handlers import DataValidationError, with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_error,
    format_money,
    format_page_footer,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.models.booking_equipment import (
    AvailabilityCheck,
    BookingEquipment,
    BookingEquipmentForm,
    DamageInfo,
)
from scuba_admin.services.booking_equipment_service import BookingEquipmentService
from scuba_admin.services.bulk_operations import bulk_return
from scuba_admin.services.errors import DEFAULT_CONFLICT_HEADER, format_conflict_message
from scuba_admin.validators.row_validators import read_table, validate_damage_rows

SOURCES = click.Choice(["Center", "Customer Own"])


def _details(record: BookingEquipment) -> str:
    pairs = [
        ("ID", record.id),
        ("Equipment", record.display_name),
        ("Source", record.equipment_source),
        ("Booking", record.booking_id),
        ("Basket", record.basket_id),
        ("Checkout", format_api_date(record.checkout_date)),
        ("Return", format_api_date(record.return_date)),
        ("Returned on", format_api_date(record.actual_return_date)),
        ("Status", record.assignment_status),
        ("Price", format_money(record.price)),
    ]
    if record.damage_reported:
        pairs.extend(
            [
                ("Damage", record.damage_description),
                ("Damage cost", format_money(record.damage_cost)),
                (
                    "Charged",
                    format_money(record.damage_charge_amount) if record.charge_customer else "no",
                ),
            ]
        )
    return format_details(pairs)


@click.group(name="assignments")
def assignments():
    """Assign equipment to bookings and baskets, check availability, record returns."""


@assignments.command(name="list")
@click.option("--page", type=int, default=1, show_default=True)
@json_option
@pass_cli
def list_assignments(cli_ctx: CliContext, page: int, as_json: bool):
    """List equipment assignments."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(BookingEquipmentService).list(page=page)
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("assignments")
            return

        rows = [
            [
                a.id,
                a.display_name,
                a.booking_id or (f"basket {a.basket_id}" if a.basket_id else None),
                format_api_date(a.checkout_date),
                format_api_date(a.return_date),
                a.assignment_status,
            ]
            for a in result
        ]
        click.echo(
            format_table(["ID", "Equipment", "Booking", "Checkout", "Return", "Status"], rows)
        )
        click.echo(format_page_footer(result, "assignments"))


@assignments.command(name="show")
@click.argument("assignment_id", type=int)
@json_option
@pass_cli
def show_assignment(cli_ctx: CliContext, assignment_id: int, as_json: bool):
    """Show one assignment."""
    with with_error_handling(cli_ctx.debug):
        record = cli_ctx.service(BookingEquipmentService).get(assignment_id)
        click.echo(to_json(record) if as_json else _details(record))


@assignments.command(name="create")
@click.option("--booking-id", type=int, default=None)
@click.option("--basket-id", type=int, default=None)
@click.option("--source", "equipment_source", type=SOURCES, default="Center", show_default=True)
@click.option("--item-id", "equipment_item_id", type=int, default=None, help="Center item")
@click.option("--checkout-date", type=click.DateTime(["%Y-%m-%d"]), default=None)
@click.option(
    "--return-date",
    type=click.DateTime(["%Y-%m-%d"]),
    default=None,
    help="Defaults to the day after checkout",
)
@click.option("--price", type=float, default=None)
@click.option("--type", "customer_equipment_type", type=str, default=None)
@click.option("--brand", "customer_equipment_brand", type=str, default=None)
@click.option("--model", "customer_equipment_model", type=str, default=None)
@click.option("--serial", "customer_equipment_serial", type=str, default=None)
@click.option("--notes", "customer_equipment_notes", type=str, default=None)
@pass_cli
def create_assignment(
    cli_ctx: CliContext,
    checkout_date: Optional[dt.datetime],
    return_date: Optional[dt.datetime],
    **fields,
):
    """Assign equipment to a booking or basket.

    Overlapping assignments of the same item are refused by the server and
    listed.

    Example:
        scuba-admin assignments create --booking-id 12 --item-id 40 --checkout-date 2025-03-01
    """
    with with_error_handling(cli_ctx.debug):
        checkout = checkout_date.date() if checkout_date else dt.date.today()
        returned = return_date.date() if return_date else default_return_date(checkout)
        form = BookingEquipmentForm(
            checkout_date=checkout,
            return_date=returned,
            **{k: v for k, v in fields.items() if v is not None},
        )
        record = cli_ctx.service(BookingEquipmentService).create(form)
        click.echo(
            format_success(
                f"Assigned {record.display_name} ({checkout} to {returned}) as {record.id}"
            )
        )


@assignments.command(name="delete")
@click.argument("assignment_id", type=int)
@yes_option
@pass_cli
def delete_assignment(cli_ctx: CliContext, assignment_id: int, yes: bool):
    """Delete an assignment."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"assignment {assignment_id}", yes)
        cli_ctx.service(BookingEquipmentService).delete(assignment_id)
        click.echo(format_success(f"Deleted assignment {assignment_id}"))


@assignments.command(name="check")
@click.argument("item_ids", type=int, nargs=-1, required=True)
@click.option("--checkout-date", type=click.DateTime(["%Y-%m-%d"]), required=True)
@click.option("--return-date", type=click.DateTime(["%Y-%m-%d"]), default=None)
@pass_cli
def check_availability(
    cli_ctx: CliContext,
    item_ids: Tuple[int, ...],
    checkout_date: dt.datetime,
    return_date: Optional[dt.datetime],
):
    """Check whether items are free for a rental period.

    Example:
        scuba-admin assignments check 40 41 --checkout-date 2025-03-01 --return-date 2025-03-05
    """
    with with_error_handling(cli_ctx.debug):
        checkout = checkout_date.date()
        returned = return_date.date() if return_date else default_return_date(checkout)
        checks = [
            AvailabilityCheck(equipment_item_id=i, checkout_date=checkout, return_date=returned)
            for i in item_ids
        ]
        service = cli_ctx.service(BookingEquipmentService)
        if len(checks) == 1:
            results = [service.check_availability(checks[0])]
        else:
            results = service.bulk_check_availability(checks)

        unavailable = 0
        for check, result in zip(checks, results):
            if result.available:
                click.echo(format_success(f"Item {check.equipment_item_id} is available"))
                continue
            unavailable += 1
            payload = {
                "message": f"Item {check.equipment_item_id}: {DEFAULT_CONFLICT_HEADER}",
                "checkout_date": str(checkout),
                "return_date": str(returned),
                "conflicting_assignments": [
                    c.model_dump() for c in result.conflicting_assignments
                ],
            }
            click.echo(format_error(format_conflict_message(payload)))

        if unavailable:
            sys.exit(8)


@assignments.command(name="return")
@click.argument("assignment_id", type=int)
@click.option("--damage", "damage_description", type=str, default=None, help="Describe damage")
@click.option("--damage-cost", type=float, default=None)
@click.option("--charge", "charge_amount", type=float, default=None, help="Charge the customer")
@click.option(
    "--charge-cost", is_flag=True, help="Charge the customer the damage cost"
)
@pass_cli
def return_assignment(
    cli_ctx: CliContext,
    assignment_id: int,
    damage_description: Optional[str],
    damage_cost: Optional[float],
    charge_amount: Optional[float],
    charge_cost: bool,
):
    """Mark equipment as returned, optionally recording damage.

    Example:
        scuba-admin assignments return 77 --damage "Torn strap" --damage-cost 15 --charge-cost
    """
    with with_error_handling(cli_ctx.debug):
        damage = None
        if damage_description or damage_cost or charge_amount or charge_cost:
            damage = DamageInfo(
                damage_reported=True,
                damage_description=damage_description,
                damage_cost=damage_cost,
                charge_customer=bool(charge_amount or charge_cost),
                damage_charge_amount=charge_amount,
            )
        record = cli_ctx.service(BookingEquipmentService).return_equipment(
            assignment_id, damage
        )
        click.echo(format_success(f"Returned {record.display_name}"))
        if damage and damage.charge_customer:
            click.echo(
                format_warning(f"Customer charged {format_money(damage.damage_charge_amount)}")
            )


@assignments.command(name="bulk-return")
@click.argument("assignment_ids", type=int, nargs=-1, required=True)
@click.option(
    "--damage-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help=(
        "CSV with columns equipment_id, damage_description, damage_cost, "
        "charge_customer, damage_charge_amount"
    ),
)
@pass_cli
def bulk_return_assignments(
    cli_ctx: CliContext, assignment_ids: Tuple[int, ...], damage_file: Optional[str]
):
    """Return several assignments at once.

    Example:
        scuba-admin assignments bulk-return 70 71 72 --damage-file damage.csv
    """
    with with_error_handling(cli_ctx.debug):
        damage = {}
        if damage_file:
            damage, report = validate_damage_rows(read_table(damage_file), assignment_ids)
            if not report.is_valid():
                raise DataValidationError(
                    f"{damage_file} has {report.error_count} error(s)", report=report
                )

        result = bulk_return(cli_ctx.service(BookingEquipmentService), assignment_ids, damage)
        click.echo(
            format_success(result.message or f"Returned {len(result.equipment)} assignment(s)")
        )
        if damage:
            click.echo(format_warning(f"Damage recorded for {len(damage)} assignment(s)"))
