"""Dive package and dive log commands."""

import datetime as dt
from typing import Optional, Tuple

import click

from scuba_admin.calculators.schedule import package_end_date
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
from scuba_admin.models.dive_log import DiveLogForm
from scuba_admin.models.package import PackageForm
from scuba_admin.services.package_service import DiveLogService, PackageService

DATE = click.DateTime(["%Y-%m-%d"])


def _json_input(f):
    f = click.option(
        "--data-file",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="JSON file with the form",
    )(f)
    return click.option("--data", type=str, default=None, help="Form as inline JSON")(f)


@click.group(name="packages")
def packages():
    """Manage dive packages and their pricing."""


@packages.command(name="list")
@click.option("--active/--inactive", "is_active", default=None)
@click.option("--search", type=str, default=None)
@json_option
@pass_cli
def list_packages(
    cli_ctx: CliContext, is_active: Optional[bool], search: Optional[str], as_json: bool
):
    """List packages."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PackageService).list(is_active=is_active, search=search)
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("packages")
            return

        rows = [
            [
                p.id,
                p.package_code,
                p.name,
                f"{p.nights}N/{p.days}D",
                p.total_dives,
                format_money(p.price_per_person, p.currency),
                p.is_active,
            ]
            for p in result
        ]
        click.echo(
            format_table(
                ["ID", "Code", "Name", "Length", "Dives", "Per person", "Active"], rows
            )
        )


@packages.command(name="show")
@click.argument("package_id", type=int)
@click.option(
    "--start-date", type=DATE, default=None, help="Also print the end date for this start"
)
@json_option
@pass_cli
def show_package(
    cli_ctx: CliContext, package_id: int, start_date: Optional[dt.datetime], as_json: bool
):
    """Show a package."""
    with with_error_handling(cli_ctx.debug):
        package = cli_ctx.service(PackageService).get(package_id)
        if as_json:
            click.echo(to_json(package))
            return

        pairs = [
            ("ID", package.id),
            ("Code", package.package_code),
            ("Name", package.name),
            ("Description", package.description),
            ("Nights", package.nights),
            ("Days", package.days),
            ("Dives", package.total_dives),
            ("Base price", format_money(package.base_price, package.currency)),
            ("Per person", format_money(package.price_per_person, package.currency)),
            ("Valid", f"{format_api_date(package.valid_from)} to {format_api_date(package.valid_until)}"),
            ("Active", package.is_active),
        ]
        if start_date:
            start = start_date.date()
            pairs.append(("Runs", f"{start} to {package_end_date(start, package.days or 1)}"))
        click.echo(format_details(pairs))

        if package.pricing_tiers:
            click.echo()
            rows = [
                [
                    t.get("min_persons"),
                    t.get("max_persons") or "+",
                    format_money(t.get("price_per_person")),
                    t.get("discount_percentage"),
                ]
                for t in package.pricing_tiers
            ]
            click.echo(format_table(["From", "To", "Per person", "Discount %"], rows))


@packages.command(name="create")
@_json_input
@click.option("--code", "package_code", type=str, default=None)
@click.option("--name", type=str, default=None)
@click.option("--base-price", type=float, default=None)
@click.option("--price-per-person", type=float, default=None)
@pass_cli
def create_package(
    cli_ctx: CliContext, data: Optional[str], data_file: Optional[str], **options
):
    """Create a package from JSON (components, options and pricing tiers included).

    Example:
        scuba-admin packages create --data-file week.json --code WEEK7
    """
    with with_error_handling(cli_ctx.debug):
        form = PackageForm(**merge_options(load_json_data(data, data_file), **options))
        package = cli_ctx.service(PackageService).create(form)
        click.echo(format_success(f"Created package {package.id}: {package.package_code}"))


@packages.command(name="update")
@click.argument("package_id", type=int)
@_json_input
@click.option("--name", type=str, default=None)
@click.option("--base-price", type=float, default=None)
@click.option("--price-per-person", type=float, default=None)
@click.option("--active/--inactive", "is_active", default=None)
@pass_cli
def update_package(
    cli_ctx: CliContext,
    package_id: int,
    data: Optional[str],
    data_file: Optional[str],
    **options,
):
    """Update a package. Nested lists are only replaced when present in the JSON."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(PackageService)
        current = service.get(package_id)
        base = {
            k: v
            for k, v in form_values(current, PackageForm).items()
            if k not in ("components", "options", "pricing_tiers")
        }
        base.update(load_json_data(data, data_file))
        form = PackageForm(**merge_options(base, **options))
        package = service.update(package_id, form)
        click.echo(format_success(f"Updated package {package.id}"))


@packages.command(name="delete")
@click.argument("package_id", type=int)
@yes_option
@pass_cli
def delete_package(cli_ctx: CliContext, package_id: int, yes: bool):
    """Delete a package."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"package {package_id}", yes)
        cli_ctx.service(PackageService).delete(package_id)
        click.echo(format_success(f"Deleted package {package_id}"))


@packages.command(name="breakdown")
@click.argument("package_id", type=int)
@json_option
@pass_cli
def package_breakdown(cli_ctx: CliContext, package_id: int, as_json: bool):
    """Show the itemised price of a package."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PackageService).breakdown(package_id)
        if as_json:
            click.echo(to_json(result))
            return
        rows = [
            [
                line.type,
                line.name,
                line.quantity,
                line.unit,
                format_money(line.unit_price),
                format_money(line.total),
            ]
            for line in result.breakdown
        ]
        click.echo(format_table(["Type", "Item", "Qty", "Unit", "Unit price", "Total"], rows))
        click.echo(f"Total: {format_money(result.total_price, result.package.get('currency'))}")


@packages.command(name="price")
@click.argument("package_id", type=int)
@click.option("--persons", type=int, required=True)
@click.option("--option-id", "option_ids", type=int, multiple=True, help="Add-on (repeatable)")
@pass_cli
def package_price(
    cli_ctx: CliContext, package_id: int, persons: int, option_ids: Tuple[int, ...]
):
    """Price a package for a group size.

    Example:
        scuba-admin packages price 3 --persons 4 --option-id 2
    """
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(PackageService).calculate_price(package_id, persons, option_ids)
        click.echo(
            f"{persons} person(s): {click.style(format_money(result.total_price), bold=True)}"
        )


@click.group(name="dive-logs")
def dive_logs():
    """Record dives."""


@dive_logs.command(name="list")
@page_options
@click.option("--customer-id", type=int, default=None, help="One customer's dive history")
@click.option("--search", type=str, default=None)
@click.option("--from", "date_from", type=DATE, default=None)
@click.option("--to", "date_to", type=DATE, default=None)
@click.option("--dive-site-id", type=int, default=None)
@json_option
@pass_cli
def list_dive_logs(
    cli_ctx: CliContext,
    page: int,
    per_page: Optional[int],
    customer_id: Optional[int],
    search: Optional[str],
    date_from: Optional[dt.datetime],
    date_to: Optional[dt.datetime],
    dive_site_id: Optional[int],
    as_json: bool,
):
    """List dive logs."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(DiveLogService)
        window = {
            "date_from": date_from.date().isoformat() if date_from else None,
            "date_to": date_to.date().isoformat() if date_to else None,
        }
        per_page = per_page or cli_ctx.config.default_per_page
        if customer_id is not None and search is None and dive_site_id is None:
            result = service.list_for_customer(customer_id, page=page, per_page=per_page, **window)
        else:
            result = service.list(
                page=page,
                per_page=per_page,
                search=search,
                customer_id=customer_id,
                dive_site_id=dive_site_id,
                **window,
            )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("dive logs")
            return

        rows = [
            [
                d.id,
                format_api_date(d.dive_date),
                d.customer.full_name if d.customer else d.customer_id,
                d.site_name,
                d.max_depth,
                d.total_dive_time,
                d.dive_type,
            ]
            for d in result
        ]
        click.echo(
            format_table(
                ["ID", "Date", "Diver", "Site", "Depth (m)", "Minutes", "Type"], rows
            )
        )
        click.echo(format_page_footer(result, "dive logs"))


@dive_logs.command(name="show")
@click.argument("dive_log_id", type=int)
@json_option
@pass_cli
def show_dive_log(cli_ctx: CliContext, dive_log_id: int, as_json: bool):
    """Show one dive log."""
    with with_error_handling(cli_ctx.debug):
        log = cli_ctx.service(DiveLogService).get(dive_log_id)
        if as_json:
            click.echo(to_json(log))
            return
        click.echo(
            format_details(
                [
                    ("ID", log.id),
                    ("Diver", log.customer.full_name if log.customer else log.customer_id),
                    ("Site", log.site_name),
                    ("Date", format_api_date(log.dive_date)),
                    ("Entry", log.entry_time),
                    ("Exit", log.exit_time),
                    ("Minutes", log.total_dive_time),
                    ("Max depth", log.max_depth),
                    ("Type", log.dive_type),
                    ("Gas", log.gas_mix),
                    (
                        "Pressure",
                        f"{log.starting_pressure} to {log.ending_pressure} {log.pressure_unit or ''}".strip()
                        if log.starting_pressure is not None
                        else None,
                    ),
                    ("Notes", log.notes),
                ]
            )
        )


def _dive_options(f):
    f = click.option("--notes", type=str, default=None)(f)
    f = click.option("--gas-mix", type=click.Choice(["Air", "Nitrox", "Trimix"]), default=None)(f)
    f = click.option("--dive-type", type=str, default=None)(f)
    f = click.option("--instructor-id", type=int, default=None)(f)
    f = click.option("--boat-id", type=int, default=None)(f)
    f = click.option("--max-depth", type=float, default=None)(f)
    f = click.option("--exit", "exit_time", type=str, default=None, help="HH:MM")(f)
    f = click.option("--entry", "entry_time", type=str, default=None, help="HH:MM")(f)
    f = click.option("--date", "dive_date", type=str, default=None, help="YYYY-MM-DD")(f)
    f = click.option("--dive-site-id", type=int, default=None)(f)
    f = click.option("--customer-id", type=int, default=None)(f)
    return _json_input(f)


@dive_logs.command(name="create")
@_dive_options
@pass_cli
def create_dive_log(
    cli_ctx: CliContext, data: Optional[str], data_file: Optional[str], **options
):
    """Log a dive. The dive time is computed from entry and exit.

    Example:
        scuba-admin dive-logs create --customer-id 7 --dive-site-id 2 --date 2025-03-01 \\
            --entry 09:10 --exit 09:58 --max-depth 18.5
    """
    with with_error_handling(cli_ctx.debug):
        form = DiveLogForm(**merge_options(load_json_data(data, data_file), **options))
        log = cli_ctx.service(DiveLogService).create(form)
        click.echo(
            format_success(f"Logged dive {log.id} ({form.total_dive_time} min, {form.max_depth} m)")
        )


@dive_logs.command(name="update")
@click.argument("dive_log_id", type=int)
@_dive_options
@pass_cli
def update_dive_log(
    cli_ctx: CliContext,
    dive_log_id: int,
    data: Optional[str],
    data_file: Optional[str],
    **options,
):
    """Update a dive log. Changing entry or exit recomputes the dive time."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(DiveLogService)
        current = service.get(dive_log_id)
        base = form_values(current, DiveLogForm)
        changes = merge_options(load_json_data(data, data_file), **options)
        if "entry_time" in changes or "exit_time" in changes:
            base.pop("total_dive_time", None)
        base.update(changes)
        log = service.update(dive_log_id, DiveLogForm(**base))
        click.echo(format_success(f"Updated dive log {log.id}"))


@dive_logs.command(name="delete")
@click.argument("dive_log_id", type=int)
@yes_option
@pass_cli
def delete_dive_log(cli_ctx: CliContext, dive_log_id: int, yes: bool):
    """Delete a dive log."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"dive log {dive_log_id}", yes)
        cli_ctx.service(DiveLogService).delete(dive_log_id)
        click.echo(format_success(f"Deleted dive log {dive_log_id}"))
