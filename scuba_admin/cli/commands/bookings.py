"""Booking commands."""

from typing import Optional

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
from scuba_admin.cli.error_handlers import with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_page_footer,
    format_success,
    format_table,
    to_json,
)
from scuba_admin.models.booking import BookingForm, BookingUpdateForm
from scuba_admin.services.customer_service import BookingService

STATUSES = click.Choice(["Pending", "Confirmed", "Completed", "Cancelled"])


@click.group(name="bookings")
def bookings():
    """Manage bookings."""


@bookings.command(name="list")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@json_option
@pass_cli
def list_bookings(cli_ctx: CliContext, page: int, as_json: bool):
    """List bookings, newest first."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(BookingService).list(page=page)
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("bookings")
            return

        rows = [
            [
                b.id,
                b.customer_name,
                format_api_date(b.start_date),
                b.number_of_divers,
                b.status,
            ]
            for b in result
        ]
        click.echo(format_table(["ID", "Customer", "Start", "Divers", "Status"], rows))
        click.echo(format_page_footer(result, "bookings"))


@bookings.command(name="show")
@click.argument("booking_id", type=int)
@json_option
@pass_cli
def show_booking(cli_ctx: CliContext, booking_id: int, as_json: bool):
    """Show one booking."""
    with with_error_handling(cli_ctx.debug):
        booking = cli_ctx.service(BookingService).get(booking_id)
        if as_json:
            click.echo(to_json(booking))
            return
        click.echo(
            format_details(
                [
                    ("ID", booking.id),
                    ("Customer", booking.customer_name),
                    ("Booked on", format_api_date(booking.booking_date)),
                    ("Start date", format_api_date(booking.start_date)),
                    ("Divers", booking.number_of_divers),
                    ("Dive site", booking.dive_site_id),
                    ("Status", booking.status),
                    ("Notes", booking.notes),
                ]
            )
        )


@bookings.command(name="create")
@click.option("--dive-center-id", type=int, required=True)
@click.option("--customer-id", type=int, required=True)
@click.option("--start-date", type=str, required=True, help="YYYY-MM-DD")
@click.option("--divers", "number_of_divers", type=int, default=None)
@click.option("--dive-site-id", type=int, default=None)
@click.option("--status", type=STATUSES, default=None)
@click.option("--notes", type=str, default=None)
@pass_cli
def create_booking(cli_ctx: CliContext, **fields):
    """Create a booking.

    Example:
        scuba-admin bookings create --dive-center-id 1 --customer-id 7 --start-date 2025-03-01
    """
    with with_error_handling(cli_ctx.debug):
        booking = cli_ctx.service(BookingService).create(BookingForm(**fields))
        click.echo(format_success(f"Created booking {booking.id}"))


@bookings.command(name="update")
@click.argument("booking_id", type=int)
@click.option("--customer-id", type=int, default=None)
@click.option("--start-date", type=str, default=None, help="YYYY-MM-DD")
@click.option("--divers", "number_of_divers", type=int, default=None)
@click.option("--dive-site-id", type=int, default=None)
@click.option("--status", type=STATUSES, default=None)
@click.option("--notes", type=str, default=None)
@pass_cli
def update_booking(cli_ctx: CliContext, booking_id: int, **fields):
    """Change some fields of a booking."""
    with with_error_handling(cli_ctx.debug):
        form = BookingUpdateForm(**{k: v for k, v in fields.items() if v is not None})
        if not form.to_payload():
            raise click.UsageError("Nothing to update; pass at least one option")
        booking = cli_ctx.service(BookingService).update(booking_id, form)
        click.echo(format_success(f"Updated booking {booking.id}"))


@bookings.command(name="delete")
@click.argument("booking_id", type=int)
@yes_option
@pass_cli
def delete_booking(cli_ctx: CliContext, booking_id: int, yes: bool):
    """Delete a booking."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"booking {booking_id}", yes)
        cli_ctx.service(BookingService).delete(booking_id)
        click.echo(format_success(f"Deleted booking {booking_id}"))
