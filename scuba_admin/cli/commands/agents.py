"""Agent commands: partner records, performance and commissions."""

from typing import Optional, Tuple

import click

from scuba_admin.calculators.time_utils import format_api_date
from scuba_admin.cli.context import (
    CliContext,
    confirm_delete,
    echo_empty,
    form_values,
    json_option,
    load_json_data,
    merge_options,
    page_options,
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
from scuba_admin.models.agent import AgentForm
from scuba_admin.services.agent_service import AgentService

AGENT_TYPES = click.Choice(
    ["Travel Agent", "Resort / Guest House", "Tour Operator", "Freelancer"]
)
AGENT_STATUSES = click.Choice(["Active", "Suspended"])


def _agent_options(f):
    f = click.option("--notes", type=str, default=None)(f)
    f = click.option("--website", type=str, default=None)(f)
    f = click.option("--brand-name", type=str, default=None)(f)
    f = click.option("--status", type=AGENT_STATUSES, default=None)(f)
    f = click.option("--city", type=str, default=None)(f)
    f = click.option("--country", type=str, default=None)(f)
    f = click.option("--type", "agent_type", type=AGENT_TYPES, default=None)(f)
    f = click.option("--name", "agent_name", type=str, default=None)(f)
    f = click.option(
        "--data-file",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="JSON file with the full agent form (contact, commercial_terms, ...)",
    )(f)
    return click.option("--data", type=str, default=None, help="Agent form as inline JSON")(f)


@click.group(name="agents")
def agents():
    """Manage agents who refer customers for commission."""


@agents.command(name="list")
@page_options
@click.option("--search", type=str, default=None)
@click.option("--status", type=AGENT_STATUSES, default=None)
@click.option("--type", "agent_type", type=AGENT_TYPES, default=None)
@click.option("--country", type=str, default=None)
@json_option
@pass_cli
def list_agents(
    cli_ctx: CliContext,
    page: int,
    per_page: Optional[int],
    search: Optional[str],
    status: Optional[str],
    agent_type: Optional[str],
    country: Optional[str],
    as_json: bool,
):
    """List agents."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(AgentService).list(
            page=page,
            per_page=per_page or cli_ctx.config.default_per_page,
            search=search,
            status=status,
            agent_type=agent_type,
            country=country,
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("agents")
            return

        rows = [
            [
                a.id,
                a.agent_name,
                a.agent_type,
                ", ".join(p for p in (a.city, a.country) if p),
                a.total_clients_referred,
                format_money(a.total_commission_earned),
                a.status,
            ]
            for a in result
        ]
        click.echo(
            format_table(
                ["ID", "Name", "Type", "Location", "Clients", "Commission", "Status"], rows
            )
        )
        click.echo(format_page_footer(result, "agents"))


@agents.command(name="show")
@click.argument("agent_id", type=int)
@json_option
@pass_cli
def show_agent(cli_ctx: CliContext, agent_id: int, as_json: bool):
    """Show one agent."""
    with with_error_handling(cli_ctx.debug):
        agent = cli_ctx.service(AgentService).get(agent_id)
        if as_json:
            click.echo(to_json(agent))
            return

        terms = agent.commercial_terms or {}
        primary = agent.contacts[0] if agent.contacts else {}
        click.echo(
            format_details(
                [
                    ("ID", agent.id),
                    ("Name", agent.agent_name),
                    ("Brand", agent.brand_name),
                    ("Type", agent.agent_type),
                    ("City", agent.city),
                    ("Country", agent.country),
                    ("Status", agent.status),
                    ("Website", agent.website),
                    ("Contact", primary.get("contact_person_name")),
                    ("Email", primary.get("email")),
                    (
                        "Commission",
                        f"{terms.get('commission_rate')} ({terms.get('commission_type')})"
                        if terms.get("commission_rate") is not None
                        else None,
                    ),
                    ("Clients referred", agent.total_clients_referred),
                    ("Revenue", format_money(agent.total_revenue_generated)),
                    ("Commission earned", format_money(agent.total_commission_earned)),
                    ("Last booking", format_api_date(agent.last_booking_date)),
                ]
            )
        )


@agents.command(name="create")
@_agent_options
@pass_cli
def create_agent(
    cli_ctx: CliContext, data: Optional[str], data_file: Optional[str], **options
):
    """Create an agent.

    Simple fields can be given as options; nested sections (contact,
    commercial_terms, billing_info, contract) come from --data or
    --data-file. Options override the JSON.

    Example:
        scuba-admin agents create --name "Blue Travel" --type "Travel Agent" \\
            --country Maldives --city Male --data-file terms.json
    """
    with with_error_handling(cli_ctx.debug):
        form = AgentForm(**merge_options(load_json_data(data, data_file), **options))
        agent = cli_ctx.service(AgentService).create(form)
        click.echo(format_success(f"Created agent {agent.id}: {agent.agent_name}"))


@agents.command(name="update")
@click.argument("agent_id", type=int)
@_agent_options
@pass_cli
def update_agent(
    cli_ctx: CliContext,
    agent_id: int,
    data: Optional[str],
    data_file: Optional[str],
    **options,
):
    """Update an agent. Unspecified simple fields keep their current values."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(AgentService)
        current = service.get(agent_id)
        base = {
            k: v
            for k, v in form_values(current, AgentForm).items()
            if k not in ("contact", "commercial_terms", "billing_info", "contract")
        }
        base.update(load_json_data(data, data_file))
        form = AgentForm(**merge_options(base, **options))
        agent = service.update(agent_id, form)
        click.echo(format_success(f"Updated agent {agent.id}"))


@agents.command(name="delete")
@click.argument("agent_id", type=int)
@yes_option
@pass_cli
def delete_agent(cli_ctx: CliContext, agent_id: int, yes: bool):
    """Delete an agent."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"agent {agent_id}", yes)
        cli_ctx.service(AgentService).delete(agent_id)
        click.echo(format_success(f"Deleted agent {agent_id}"))


@agents.command(name="performance")
@click.argument("agent_id", type=int)
@json_option
@pass_cli
def agent_performance(cli_ctx: CliContext, agent_id: int, as_json: bool):
    """Show referral and revenue metrics for an agent."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(AgentService).performance(agent_id)
        if as_json:
            click.echo(to_json(result))
            return
        name = result.agent.agent_name if result.agent else f"Agent {agent_id}"
        click.echo(click.style(name, bold=True))
        click.echo(
            format_details(
                [(key.replace("_", " ").capitalize(), value) for key, value in result.metrics.items()]
            )
        )


@agents.command(name="commissions")
@click.argument("agent_id", type=int)
@page_options
@click.option("--search", type=str, default=None)
@json_option
@pass_cli
def agent_commissions(
    cli_ctx: CliContext,
    agent_id: int,
    page: int,
    per_page: Optional[int],
    search: Optional[str],
    as_json: bool,
):
    """List commission records of an agent."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(AgentService).commissions(
            agent_id,
            page=page,
            per_page=per_page or cli_ctx.config.default_per_page,
            search=search,
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("commissions")
            return

        rows = [
            [
                c.get("id"),
                c.get("invoice_id"),
                format_money(c.get("invoice_amount")),
                format_money(c.get("commission_amount")),
                c.get("status"),
                format_api_date(c.get("created_at")),
            ]
            for c in result
        ]
        click.echo(
            format_table(["ID", "Invoice", "Amount", "Commission", "Status", "Date"], rows)
        )
        click.echo(format_page_footer(result, "commissions"))


@agents.command(name="calculate-commissions")
@click.argument("agent_id", type=int)
@click.option(
    "--invoice-id",
    "invoice_ids",
    type=int,
    multiple=True,
    help="Limit to these invoices (repeatable); all eligible invoices when omitted",
)
@pass_cli
def calculate_commissions(cli_ctx: CliContext, agent_id: int, invoice_ids: Tuple[int, ...]):
    """Recalculate an agent's commissions."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(AgentService).calculate_commissions(agent_id, invoice_ids)
        message = result.get("message") if isinstance(result, dict) else None
        click.echo(format_success(message or f"Calculated commissions for agent {agent_id}"))
