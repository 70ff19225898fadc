"""Invoice and payment commands."""

import datetime as dt
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
    format_money,
    format_page_footer,
    format_success,
    format_table,
    to_json,
)
from scuba_admin.models.invoice import (
    GenerateInvoiceForm,
    InvoiceForm,
    InvoiceUpdateForm,
    PaymentForm,
    PaymentUpdateForm,
)
from scuba_admin.services.billing_service import InvoiceService, PaymentService

INVOICE_TYPES = click.Choice(["Advance", "Final", "Full"])
INVOICE_STATUSES = click.Choice(["Draft", "Paid", "Partially Paid", "Refunded"])
PAYMENT_TYPES = click.Choice(["Advance", "Final", "Refund"])
PAYMENT_METHODS = click.Choice(["Cash", "Card", "Bank"])
DATE = click.DateTime(["%Y-%m-%d"])


def _date(value: Optional[dt.datetime]) -> Optional[dt.date]:
    return value.date() if value else None


@click.group(name="invoices")
def invoices():
    """Manage invoices."""


@invoices.command(name="list")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--status", type=INVOICE_STATUSES, default=None)
@click.option("--customer-id", type=int, default=None)
@click.option("--type", "invoice_type", type=INVOICE_TYPES, default=None)
@json_option
@pass_cli
def list_invoices(
    cli_ctx: CliContext,
    page: int,
    status: Optional[str],
    customer_id: Optional[int],
    invoice_type: Optional[str],
    as_json: bool,
):
    """List invoices."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(InvoiceService).list(
            status=status, customer_id=customer_id, invoice_type=invoice_type, page=page
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("invoices")
            return

        rows = [
            [
                i.id,
                i.invoice_no,
                format_api_date(i.invoice_date),
                i.booking_id,
                i.invoice_type,
                format_money(i.total, i.currency),
                format_money(i.balance_due),
                i.status,
            ]
            for i in result
        ]
        click.echo(
            format_table(
                ["ID", "Invoice", "Date", "Booking", "Type", "Total", "Due", "Status"], rows
            )
        )
        click.echo(format_page_footer(result, "invoices"))


@invoices.command(name="show")
@click.argument("invoice_id", type=int)
@json_option
@pass_cli
def show_invoice(cli_ctx: CliContext, invoice_id: int, as_json: bool):
    """Show an invoice with its lines and payments."""
    with with_error_handling(cli_ctx.debug):
        invoice = cli_ctx.service(InvoiceService).get(invoice_id)
        if as_json:
            click.echo(to_json(invoice))
            return

        click.echo(
            format_details(
                [
                    ("ID", invoice.id),
                    ("Invoice no", invoice.invoice_no),
                    ("Date", format_api_date(invoice.invoice_date)),
                    ("Booking", invoice.booking_id),
                    ("Type", invoice.invoice_type),
                    ("Status", invoice.status),
                    ("Subtotal", format_money(invoice.subtotal, invoice.currency)),
                    ("Tax", format_money(invoice.tax, invoice.currency)),
                    ("Total", format_money(invoice.total, invoice.currency)),
                    ("Paid", format_money(invoice.amount_paid, invoice.currency)),
                    ("Balance due", format_money(invoice.balance_due, invoice.currency)),
                ]
            )
        )
        if invoice.invoice_items:
            click.echo()
            rows = [
                [
                    line.description,
                    line.quantity,
                    format_money(line.unit_price),
                    format_money(line.total),
                ]
                for line in invoice.invoice_items
            ]
            click.echo(format_table(["Description", "Qty", "Unit price", "Total"], rows))
        if invoice.payments:
            click.echo()
            rows = [
                [
                    p.id,
                    format_api_date(p.payment_date),
                    p.payment_type,
                    p.method,
                    format_money(p.amount),
                ]
                for p in invoice.payments
            ]
            click.echo(format_table(["Payment", "Date", "Type", "Method", "Amount"], rows))


@invoices.command(name="create")
@click.option("--booking-id", type=int, required=True)
@click.option("--type", "invoice_type", type=INVOICE_TYPES, default=None)
@click.option("--invoice-date", type=DATE, default=None)
@click.option("--tax", "tax_percentage", type=float, default=None, help="Tax percentage")
@pass_cli
def create_invoice(
    cli_ctx: CliContext,
    booking_id: int,
    invoice_type: Optional[str],
    invoice_date: Optional[dt.datetime],
    tax_percentage: Optional[float],
):
    """Create an empty invoice for a booking."""
    with with_error_handling(cli_ctx.debug):
        form = InvoiceForm(
            booking_id=booking_id,
            invoice_type=invoice_type,
            invoice_date=_date(invoice_date),
            tax_percentage=tax_percentage,
        )
        invoice = cli_ctx.service(InvoiceService).create(form)
        click.echo(format_success(f"Created invoice {invoice.invoice_no or invoice.id}"))


@invoices.command(name="generate")
@click.option("--booking-id", type=int, required=True)
@click.option("--type", "invoice_type", type=INVOICE_TYPES, default=None)
@click.option("--dives/--no-dives", "include_dives", default=None, help="Bill logged dives")
@click.option(
    "--equipment/--no-equipment", "include_equipment", default=None, help="Bill rentals"
)
@click.option("--tax", "tax_percentage", type=float, default=None, help="Tax percentage")
@pass_cli
def generate_invoice(
    cli_ctx: CliContext,
    booking_id: int,
    invoice_type: Optional[str],
    include_dives: Optional[bool],
    include_equipment: Optional[bool],
    tax_percentage: Optional[float],
):
    """Generate an invoice from a booking's dives and equipment.

    Example:
        scuba-admin invoices generate --booking-id 12 --type Full --tax 8
    """
    with with_error_handling(cli_ctx.debug):
        form = GenerateInvoiceForm(
            booking_id=booking_id,
            invoice_type=invoice_type,
            include_dives=include_dives,
            include_equipment=include_equipment,
            tax_percentage=tax_percentage,
        )
        invoice = cli_ctx.service(InvoiceService).generate_from_booking(form)
        click.echo(
            format_success(
                f"Generated invoice {invoice.invoice_no or invoice.id}: "
                f"{format_money(invoice.total, invoice.currency)}"
            )
        )


@invoices.command(name="update")
@click.argument("invoice_id", type=int)
@click.option("--invoice-date", type=DATE, default=None)
@click.option("--status", type=INVOICE_STATUSES, default=None)
@click.option("--type", "invoice_type", type=INVOICE_TYPES, default=None)
@click.option("--tax", type=float, default=None, help="Tax amount")
@pass_cli
def update_invoice(
    cli_ctx: CliContext,
    invoice_id: int,
    invoice_date: Optional[dt.datetime],
    status: Optional[str],
    invoice_type: Optional[str],
    tax: Optional[float],
):
    """Update an invoice."""
    with with_error_handling(cli_ctx.debug):
        form = InvoiceUpdateForm(
            invoice_date=_date(invoice_date),
            status=status,
            invoice_type=invoice_type,
            tax=tax,
        )
        if not form.to_payload():
            raise click.UsageError("Nothing to update; pass at least one option")
        invoice = cli_ctx.service(InvoiceService).update(invoice_id, form)
        click.echo(format_success(f"Updated invoice {invoice.invoice_no or invoice.id}"))


@invoices.command(name="delete")
@click.argument("invoice_id", type=int)
@yes_option
@pass_cli
def delete_invoice(cli_ctx: CliContext, invoice_id: int, yes: bool):
    """Delete an invoice."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"invoice {invoice_id}", yes)
        cli_ctx.service(InvoiceService).delete(invoice_id)
        click.echo(format_success(f"Deleted invoice {invoice_id}"))


@click.group(name="payments")
def payments():
    """Record payments against invoices."""


@payments.command(name="list")
@click.option("--invoice-id", type=int, default=None)
@json_option
@pass_cli
def list_payments(cli_ctx: CliContext, invoice_id: Optional[int], as_json: bool):
    """List payments, optionally for one invoice."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PaymentService).list(invoice_id=invoice_id)
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("payments")
            return

        rows = [
            [
                p.id,
                p.invoice_id,
                format_api_date(p.payment_date),
                p.payment_type,
                p.method,
                format_money(p.amount),
                p.reference,
            ]
            for p in result
        ]
        click.echo(
            format_table(["ID", "Invoice", "Date", "Type", "Method", "Amount", "Reference"], rows)
        )


@payments.command(name="show")
@click.argument("payment_id", type=int)
@json_option
@pass_cli
def show_payment(cli_ctx: CliContext, payment_id: int, as_json: bool):
    """Show one payment."""
    with with_error_handling(cli_ctx.debug):
        payment = cli_ctx.service(PaymentService).get(payment_id)
        if as_json:
            click.echo(to_json(payment))
            return
        click.echo(
            format_details(
                [
                    ("ID", payment.id),
                    ("Invoice", payment.invoice_id),
                    ("Date", format_api_date(payment.payment_date)),
                    ("Type", payment.payment_type),
                    ("Method", payment.method),
                    ("Amount", format_money(payment.amount)),
                    ("Reference", payment.reference),
                ]
            )
        )


@payments.command(name="create")
@click.option("--invoice-id", type=int, required=True)
@click.option("--amount", type=float, required=True)
@click.option("--type", "payment_type", type=PAYMENT_TYPES, required=True)
@click.option("--method", type=PAYMENT_METHODS, required=True)
@click.option("--payment-date", type=DATE, default=None, help="Defaults to today on the server")
@click.option("--reference", type=str, default=None)
@pass_cli
def create_payment(
    cli_ctx: CliContext,
    invoice_id: int,
    amount: float,
    payment_type: str,
    method: str,
    payment_date: Optional[dt.datetime],
    reference: Optional[str],
):
    """Record a payment.

    Example:
        scuba-admin payments create --invoice-id 7 --amount 150 --type Advance --method Card
    """
    with with_error_handling(cli_ctx.debug):
        form = PaymentForm(
            invoice_id=invoice_id,
            amount=amount,
            payment_type=payment_type,
            method=method,
            payment_date=_date(payment_date),
            reference=reference,
        )
        payment = cli_ctx.service(PaymentService).create(form)
        click.echo(
            format_success(f"Recorded payment {payment.id} of {format_money(payment.amount)}")
        )


@payments.command(name="update")
@click.argument("payment_id", type=int)
@click.option("--amount", type=float, default=None)
@click.option("--type", "payment_type", type=PAYMENT_TYPES, default=None)
@click.option("--method", type=PAYMENT_METHODS, default=None)
@click.option("--payment-date", type=DATE, default=None)
@click.option("--reference", type=str, default=None)
@pass_cli
def update_payment(
    cli_ctx: CliContext,
    payment_id: int,
    amount: Optional[float],
    payment_type: Optional[str],
    method: Optional[str],
    payment_date: Optional[dt.datetime],
    reference: Optional[str],
):
    """Correct a payment."""
    with with_error_handling(cli_ctx.debug):
        form = PaymentUpdateForm(
            amount=amount,
            payment_type=payment_type,
            method=method,
            payment_date=_date(payment_date),
            reference=reference,
        )
        if not form.to_payload():
            raise click.UsageError("Nothing to update; pass at least one option")
        payment = cli_ctx.service(PaymentService).update(payment_id, form)
        click.echo(format_success(f"Updated payment {payment.id}"))


@payments.command(name="delete")
@click.argument("payment_id", type=int)
@yes_option
@pass_cli
def delete_payment(cli_ctx: CliContext, payment_id: int, yes: bool):
    """Delete a payment."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"payment {payment_id}", yes)
        cli_ctx.service(PaymentService).delete(payment_id)
        click.echo(format_success(f"Deleted payment {payment_id}"))
