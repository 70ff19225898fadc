"""Equipment basket commands."""

import datetime as dt
import sys
from typing import Optional, Tuple

import click

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
    format_info,
    format_money,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.models.booking_equipment import BasketForm, BasketUpdateForm
from scuba_admin.services.booking_equipment_service import (
    BookingEquipmentService,
    EquipmentBasketService,
)
from scuba_admin.services.bulk_operations import bulk_add_basket_equipment
from scuba_admin.validators.row_validators import (
    read_table,
    validate_basket_rows,
    validate_damage_rows,
)

BASKET_STATUSES = click.Choice(["Active", "Returned", "Lost"])
DATE = click.DateTime(["%Y-%m-%d"])


@click.group(name="baskets")
def baskets():
    """Manage equipment baskets (a customer's rental bundle)."""


@baskets.command(name="list")
@click.option("--status", type=BASKET_STATUSES, default=None)
@click.option("--customer-id", type=int, default=None)
@json_option
@pass_cli
def list_baskets(
    cli_ctx: CliContext, status: Optional[str], customer_id: Optional[int], as_json: bool
):
    """List baskets."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(EquipmentBasketService).list(
            status=status, customer_id=customer_id
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("baskets")
            return

        rows = [
            [
                b.id,
                b.basket_no,
                b.customer.full_name if b.customer else b.customer_id,
                format_api_date(b.checkout_date),
                format_api_date(b.expected_return_date),
                len(b.booking_equipment),
                b.status,
            ]
            for b in result
        ]
        click.echo(
            format_table(
                ["ID", "Basket", "Customer", "Checkout", "Due back", "Items", "Status"], rows
            )
        )


@baskets.command(name="show")
@click.argument("basket_id", type=int)
@json_option
@pass_cli
def show_basket(cli_ctx: CliContext, basket_id: int, as_json: bool):
    """Show a basket and the equipment in it."""
    with with_error_handling(cli_ctx.debug):
        basket = cli_ctx.service(EquipmentBasketService).get(basket_id)
        if as_json:
            click.echo(to_json(basket))
            return

        click.echo(
            format_details(
                [
                    ("ID", basket.id),
                    ("Basket no", basket.basket_no),
                    ("Center bucket", basket.center_bucket_no),
                    ("Customer", basket.customer.full_name if basket.customer else None),
                    ("Booking", basket.booking_id),
                    ("Checkout", format_api_date(basket.checkout_date)),
                    ("Due back", format_api_date(basket.expected_return_date)),
                    ("Returned", format_api_date(basket.actual_return_date)),
                    ("Status", basket.status),
                    ("Notes", basket.notes),
                ]
            )
        )
        if basket.booking_equipment:
            click.echo()
            rows = [
                [e.id, e.display_name, e.equipment_source, e.assignment_status, format_money(e.price)]
                for e in basket.booking_equipment
            ]
            click.echo(format_table(["ID", "Equipment", "Source", "Status", "Price"], rows))


@baskets.command(name="create")
@click.option("--customer-id", type=int, required=True)
@click.option("--booking-id", type=int, default=None)
@click.option("--center-bucket-no", type=str, default=None)
@click.option("--expected-return-date", type=DATE, default=None)
@click.option("--notes", type=str, default=None)
@pass_cli
def create_basket(
    cli_ctx: CliContext,
    customer_id: int,
    booking_id: Optional[int],
    center_bucket_no: Optional[str],
    expected_return_date: Optional[dt.datetime],
    notes: Optional[str],
):
    """Open a basket for a customer."""
    with with_error_handling(cli_ctx.debug):
        form = BasketForm(
            customer_id=customer_id,
            booking_id=booking_id,
            center_bucket_no=center_bucket_no,
            expected_return_date=expected_return_date.date() if expected_return_date else None,
            notes=notes,
        )
        basket = cli_ctx.service(EquipmentBasketService).create(form)
        click.echo(format_success(f"Created basket {basket.basket_no or basket.id}"))


@baskets.command(name="update")
@click.argument("basket_id", type=int)
@click.option("--center-bucket-no", type=str, default=None)
@click.option("--expected-return-date", type=DATE, default=None)
@click.option("--status", type=BASKET_STATUSES, default=None)
@click.option("--notes", type=str, default=None)
@pass_cli
def update_basket(
    cli_ctx: CliContext,
    basket_id: int,
    center_bucket_no: Optional[str],
    expected_return_date: Optional[dt.datetime],
    status: Optional[str],
    notes: Optional[str],
):
    """Update basket details."""
    with with_error_handling(cli_ctx.debug):
        form = BasketUpdateForm(
            center_bucket_no=center_bucket_no,
            expected_return_date=expected_return_date.date() if expected_return_date else None,
            status=status,
            notes=notes,
        )
        if not form.to_payload():
            raise click.UsageError("Nothing to update; pass at least one option")
        basket = cli_ctx.service(EquipmentBasketService).update(basket_id, form)
        click.echo(format_success(f"Updated basket {basket.basket_no or basket.id}"))


@baskets.command(name="delete")
@click.argument("basket_id", type=int)
@yes_option
@pass_cli
def delete_basket(cli_ctx: CliContext, basket_id: int, yes: bool):
    """Delete a basket."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"basket {basket_id}", yes)
        cli_ctx.service(EquipmentBasketService).delete(basket_id)
        click.echo(format_success(f"Deleted basket {basket_id}"))


@baskets.command(name="add-items")
@click.argument("basket_id", type=int)
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--checkout-date", type=DATE, default=None, help="Defaults to today")
@click.option(
    "--return-date", type=DATE, default=None, help="Defaults to the day after checkout"
)
@pass_cli
def add_items(
    cli_ctx: CliContext,
    basket_id: int,
    csv_file: str,
    checkout_date: Optional[dt.datetime],
    return_date: Optional[dt.datetime],
):
    """Add the equipment listed in a CSV file to a basket.

    Columns: equipment_source (Center or Customer Own), equipment_item_id,
    price, customer_equipment_type, customer_equipment_brand,
    customer_equipment_model, customer_equipment_serial,
    customer_equipment_notes. Items are added in parallel; unavailable
    items are reported with the assignments they clash with.

    Example:
        scuba-admin baskets add-items 5 rental.csv --checkout-date 2025-03-01
    """
    with with_error_handling(cli_ctx.debug):
        items, report = validate_basket_rows(read_table(csv_file))
        if not report.is_valid():
            raise DataValidationError(
                f"{csv_file} has {report.error_count} error(s)", report=report
            )

        click.echo(format_info(f"Adding {len(items)} item(s) to basket {basket_id}..."))
        result = bulk_add_basket_equipment(
            cli_ctx.service(BookingEquipmentService),
            basket_id,
            items,
            checkout_date=checkout_date.date() if checkout_date else None,
            return_date=return_date.date() if return_date else None,
            max_workers=cli_ctx.config.bulk_concurrency,
        )

        for failure in result.failed:
            click.echo(format_error(f"Row {failure.index + 1}: {failure.message}"))
        if result.failed:
            click.echo(format_warning(result.summary("assignments")))
            if not result.success:
                sys.exit(8)
            return
        click.echo(format_success(result.summary("assignments")))


@baskets.command(name="return")
@click.argument("basket_id", type=int)
@click.option(
    "--only",
    "assignment_ids",
    type=int,
    multiple=True,
    help="Return only these assignments (repeatable)",
)
@click.option(
    "--damage-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="CSV of damage per assignment (see 'assignments bulk-return')",
)
@pass_cli
def return_basket(
    cli_ctx: CliContext,
    basket_id: int,
    assignment_ids: Tuple[int, ...],
    damage_file: Optional[str],
):
    """Return a basket, or part of it."""
    with with_error_handling(cli_ctx.debug):
        damage = {}
        if damage_file:
            damage, report = validate_damage_rows(
                read_table(damage_file), assignment_ids or None
            )
            if not report.is_valid():
                raise DataValidationError(
                    f"{damage_file} has {report.error_count} error(s)", report=report
                )

        basket = cli_ctx.service(EquipmentBasketService).return_basket(
            basket_id, equipment_ids=assignment_ids or None, damage_info=damage
        )
        click.echo(format_success(f"Basket {basket.basket_no or basket.id} is {basket.status}"))
