"""Customer pre-registration commands."""

from typing import Optional

import click

from scuba_admin.calculators.time_utils import format_api_date
from scuba_admin.cli.context import (
    CliContext,
    echo_empty,
    json_option,
    load_json_data,
    page_options,
    pass_cli,
    yes_option,
    confirm_delete,
)
from scuba_admin.cli.error_handlers import with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_info,
    format_page_footer,
    format_success,
    format_table,
    to_json,
)
from scuba_admin.models.pre_registration import PreRegistrationForm
from scuba_admin.services.pre_registration_service import PreRegistrationService

SUBMISSION_STATUSES = click.Choice(["pending", "approved", "rejected"])


@click.group(name="pre-registrations")
def pre_registrations():
    """Send pre-registration links and review what customers submit."""


@pre_registrations.command(name="generate-link")
@click.option("--expires-in-days", type=int, default=None, help="Server default when omitted")
@pass_cli
def generate_link(cli_ctx: CliContext, expires_in_days: Optional[int]):
    """Create one pre-registration link."""
    with with_error_handling(cli_ctx.debug):
        link = cli_ctx.service(PreRegistrationService).generate_link(expires_in_days)
        click.echo(format_success(f"Link expires {format_api_date(link.expires_at)}"))
        click.echo(link.url or link.token)


@pre_registrations.command(name="generate-links")
@click.argument("quantity", type=int)
@click.option("--expires-in-days", type=int, default=None)
@pass_cli
def generate_links(cli_ctx: CliContext, quantity: int, expires_in_days: Optional[int]):
    """Create several links at once, one URL per line.

    Example:
        scuba-admin pre-registrations generate-links 10 > links.txt
    """
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PreRegistrationService).generate_bulk_links(
            quantity, expires_in_days
        )
        for link in result.links:
            click.echo(link.url or link.token)
        click.echo(format_success(result.message or f"Generated {result.count} link(s)"), err=True)


@pre_registrations.command(name="links")
@page_options
@json_option
@pass_cli
def pending_links(cli_ctx: CliContext, page: int, per_page: Optional[int], as_json: bool):
    """List links that have not been used yet."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PreRegistrationService).pending_links(
            page=page, per_page=per_page or cli_ctx.config.default_per_page
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("unused links")
            return

        rows = [
            [
                link.id,
                link.url or link.token,
                format_api_date(link.created_at),
                format_api_date(link.expires_at),
                "yes" if link.is_expired else "no",
            ]
            for link in result
        ]
        click.echo(format_table(["ID", "Link", "Created", "Expires", "Expired"], rows, max_width=60))
        click.echo(format_page_footer(result, "links"))


@pre_registrations.command(name="delete-link")
@click.argument("link_id", type=int)
@yes_option
@pass_cli
def delete_link(cli_ctx: CliContext, link_id: int, yes: bool):
    """Delete an unused link."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"link {link_id}", yes)
        cli_ctx.service(PreRegistrationService).delete_link(link_id)
        click.echo(format_success(f"Deleted link {link_id}"))


@pre_registrations.command(name="submissions")
@page_options
@click.option("--status", type=SUBMISSION_STATUSES, default=None)
@click.option("--search", type=str, default=None)
@json_option
@pass_cli
def list_submissions(
    cli_ctx: CliContext,
    page: int,
    per_page: Optional[int],
    status: Optional[str],
    search: Optional[str],
    as_json: bool,
):
    """List submissions."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PreRegistrationService).submissions(
            status=status,
            search=search,
            page=page,
            per_page=per_page or cli_ctx.config.default_per_page,
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("submissions")
            return

        rows = [
            [
                s.id,
                s.customer_name,
                s.customer_email,
                format_api_date(s.submitted_at),
                s.status,
            ]
            for s in result
        ]
        click.echo(format_table(["ID", "Name", "Email", "Submitted", "Status"], rows))
        click.echo(format_page_footer(result, "submissions"))


@pre_registrations.command(name="show")
@click.argument("submission_id", type=int)
@json_option
@pass_cli
def show_submission(cli_ctx: CliContext, submission_id: int, as_json: bool):
    """Show everything a customer submitted."""
    with with_error_handling(cli_ctx.debug):
        sub = cli_ctx.service(PreRegistrationService).submission(submission_id)
        if as_json:
            click.echo(to_json(sub))
            return

        customer = sub.customer_data
        click.echo(
            format_details(
                [
                    ("ID", sub.id),
                    ("Status", sub.status),
                    ("Submitted", format_api_date(sub.submitted_at)),
                    ("Name", customer.get("full_name")),
                    ("Email", customer.get("email")),
                    ("Phone", customer.get("phone")),
                    ("Nationality", customer.get("nationality")),
                    ("Date of birth", customer.get("date_of_birth")),
                    ("Emergency contacts", len(sub.emergency_contacts_data)),
                    ("Certifications", len(sub.certifications_data)),
                    ("Insurance", (sub.insurance_data or {}).get("insurance_provider")),
                    ("Accommodation", (sub.accommodation_data or {}).get("name")),
                    ("Review notes", sub.review_notes),
                    ("Customer", sub.created_customer_id),
                ]
            )
        )
        if sub.certifications_data:
            click.echo()
            rows = [
                [c.get("certification_name"), c.get("agency"), format_api_date(c.get("certification_date"))]
                for c in sub.certifications_data
            ]
            click.echo(format_table(["Certification", "Agency", "Date"], rows))


@pre_registrations.command(name="approve")
@click.argument("submission_id", type=int)
@click.option("--notes", "review_notes", type=str, default=None)
@pass_cli
def approve_submission(cli_ctx: CliContext, submission_id: int, review_notes: Optional[str]):
    """Approve a submission, creating the customer."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PreRegistrationService).approve(submission_id, review_notes)
        click.echo(format_success(result.message or "Submission approved"))
        if result.customer_id:
            click.echo(format_info(f"Customer ID: {result.customer_id}"))


@pre_registrations.command(name="reject")
@click.argument("submission_id", type=int)
@click.option("--notes", "review_notes", type=str, required=True, help="Reason, required")
@pass_cli
def reject_submission(cli_ctx: CliContext, submission_id: int, review_notes: str):
    """Reject a submission."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PreRegistrationService).reject(submission_id, review_notes)
        click.echo(format_success(result.message or "Submission rejected"))


@pre_registrations.command(name="token")
@click.argument("token", type=str)
@pass_cli
def token_info(cli_ctx: CliContext, token: str):
    """Check a link token as the public form would (no login needed)."""
    with with_error_handling(cli_ctx.debug):
        info = cli_ctx.service(PreRegistrationService).get_by_token(token)
        click.echo(
            format_details(
                [
                    ("Dive center", info.dive_center.get("name")),
                    ("Expires", format_api_date(info.expires_at)),
                ]
            )
        )


@pre_registrations.command(name="submit")
@click.argument("token", type=str)
@click.option(
    "--data-file",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="JSON with customer, emergency_contacts, certifications, insurance, accommodation",
)
@pass_cli
def submit_form(cli_ctx: CliContext, token: str, data_file: str):
    """Submit a pre-registration on a customer's behalf (public endpoint)."""
    with with_error_handling(cli_ctx.debug):
        form = PreRegistrationForm(**load_json_data(None, data_file))
        result = cli_ctx.service(PreRegistrationService).submit(token, form)
        message = result.get("message") if isinstance(result, dict) else None
        click.echo(format_success(message or "Pre-registration submitted"))
