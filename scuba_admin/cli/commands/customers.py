"""Customer commands."""

from typing import Optional, Tuple

import click

from scuba_admin.calculators.time_utils import format_api_date
from scuba_admin.cli.context import (
    CliContext,
    confirm_delete,
    echo_empty,
    form_values,
    json_option,
    page_options,
    pass_cli,
    yes_option,
)
from scuba_admin.cli.error_handlers import with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_page_footer,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.models.customer import Customer, CustomerForm
from scuba_admin.services.bulk_operations import bulk_assign_agent
from scuba_admin.services.customer_service import CustomerService

_FIELDS = (
    ("--email", "email"),
    ("--phone", "phone"),
    ("--address", "address"),
    ("--city", "city"),
    ("--zip-code", "zip_code"),
    ("--country", "country"),
    ("--passport-no", "passport_no"),
    ("--nationality", "nationality"),
    ("--gender", "gender"),
    ("--date-of-birth", "date_of_birth"),
    ("--departure-date", "departure_date"),
    ("--departure-flight", "departure_flight"),
    ("--departure-flight-time", "departure_flight_time"),
    ("--departure-to", "departure_to"),
)


def customer_fields(f):
    """Attach one option per optional customer field."""
    for flag, name in reversed(_FIELDS):
        f = click.option(flag, name, type=str, default=None)(f)
    return click.option("--agent-id", type=int, default=None, help="Referring agent")(f)


def _details(customer: Customer) -> str:
    agent = customer.agent.agent_name if customer.agent else customer.agent_id
    pairs = [
        ("ID", customer.id),
        ("Name", customer.full_name),
        ("Email", customer.email),
        ("Phone", customer.phone),
        ("Address", customer.address),
        ("City", customer.city),
        ("Country", customer.country),
        ("Nationality", customer.nationality),
        ("Passport", customer.passport_no),
        ("Date of birth", format_api_date(customer.date_of_birth)),
        ("Departure", format_api_date(customer.departure_date)),
        ("Agent", agent),
    ]
    for contact in customer.emergency_contacts:
        label = "Emergency contact" + (" (primary)" if contact.is_primary else "")
        pairs.append((label, f"{contact.name or '-'} {contact.relationship or ''}".strip()))
    return format_details(pairs)


@click.group(name="customers")
def customers():
    """Manage customers."""


@customers.command(name="list")
@page_options
@click.option("--search", type=str, default=None, help="Match name or email")
@json_option
@pass_cli
def list_customers(
    cli_ctx: CliContext, page: int, per_page: Optional[int], search: Optional[str], as_json: bool
):
    """List customers.

    Example:
        scuba-admin customers list --search smith
    """
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(CustomerService).list(
            page=page, per_page=per_page or cli_ctx.config.default_per_page, search=search
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("customers")
            return

        rows = [
            [
                c.id,
                c.full_name,
                c.email,
                c.phone,
                c.country,
                c.agent.agent_name if c.agent else None,
            ]
            for c in result
        ]
        click.echo(format_table(["ID", "Name", "Email", "Phone", "Country", "Agent"], rows))
        click.echo(format_page_footer(result, "customers"))


@customers.command(name="show")
@click.argument("customer_id", type=int)
@json_option
@pass_cli
def show_customer(cli_ctx: CliContext, customer_id: int, as_json: bool):
    """Show one customer."""
    with with_error_handling(cli_ctx.debug):
        customer = cli_ctx.service(CustomerService).get(customer_id)
        click.echo(to_json(customer) if as_json else _details(customer))


@customers.command(name="create")
@click.option("--name", "full_name", type=str, required=True, help="Full name")
@customer_fields
@pass_cli
def create_customer(cli_ctx: CliContext, full_name: str, **fields):
    """Create a customer.

    Example:
        scuba-admin customers create --name "Ana Silva" --email ana@example.com
    """
    with with_error_handling(cli_ctx.debug):
        form = CustomerForm(full_name=full_name, **fields)
        customer = cli_ctx.service(CustomerService).create(form)
        click.echo(format_success(f"Created customer {customer.id}: {customer.full_name}"))


@customers.command(name="update")
@click.argument("customer_id", type=int)
@click.option("--name", "full_name", type=str, default=None, help="Full name")
@customer_fields
@pass_cli
def update_customer(cli_ctx: CliContext, customer_id: int, full_name: Optional[str], **fields):
    """Update a customer. Unspecified fields keep their current value."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(CustomerService)
        current = service.get(customer_id)
        values = form_values(current, CustomerForm)
        values.update({k: v for k, v in fields.items() if v is not None})
        if full_name is not None:
            values["full_name"] = full_name
        form = CustomerForm(**{k: v for k, v in values.items() if v is not None})
        customer = service.update(customer_id, form)
        click.echo(format_success(f"Updated customer {customer.id}"))


@customers.command(name="delete")
@click.argument("customer_id", type=int)
@yes_option
@pass_cli
def delete_customer(cli_ctx: CliContext, customer_id: int, yes: bool):
    """Delete a customer."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"customer {customer_id}", yes)
        cli_ctx.service(CustomerService).delete(customer_id)
        click.echo(format_success(f"Deleted customer {customer_id}"))


@customers.command(name="assign-agent")
@click.argument("customer_ids", type=int, nargs=-1, required=True)
@click.option("--agent-id", type=int, default=None, help="Agent to assign")
@click.option("--unassign", is_flag=True, help="Remove the agent instead")
@pass_cli
def assign_agent(
    cli_ctx: CliContext, customer_ids: Tuple[int, ...], agent_id: Optional[int], unassign: bool
):
    """Assign an agent to several customers at once.

    Example:
        scuba-admin customers assign-agent 4 5 9 --agent-id 2
    """
    with with_error_handling(cli_ctx.debug):
        if (agent_id is not None) == unassign:
            raise click.UsageError("Give exactly one of --agent-id or --unassign")

        result = bulk_assign_agent(
            cli_ctx.service(CustomerService), customer_ids, None if unassign else agent_id
        )
        click.echo(format_success(f"Updated {result.success_count} customer(s)"))
        if result.failed_count:
            click.echo(format_warning(f"{result.failed_count} customer(s) could not be updated"))
            for error in result.errors:
                click.echo(f"  - {error}")
