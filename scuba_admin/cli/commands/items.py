"""Equipment item commands: units, bulk creation and servicing."""

import sys
from typing import Iterator, List, Optional, Tuple

import click

from scuba_admin.calculators.schedule import ServiceStatus, service_status
from scuba_admin.calculators.time_utils import format_api_date, parse_api_date
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
from scuba_admin.cli.error_handlers import DataValidationError, with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_error,
    format_info,
    format_money,
    format_page_footer,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.cli.utils.progress import bar_callback, create_progress_bar
from scuba_admin.models.equipment import (
    BulkServiceForm,
    EquipmentItem,
    EquipmentItemForm,
    EquipmentItemTemplate,
    ServiceHistoryForm,
)
from scuba_admin.services.bulk_operations import bulk_create_equipment_items, failures_table
from scuba_admin.services.equipment_service import EquipmentItemService, ServiceHistoryService
from scuba_admin.validators.row_validators import read_table, validate_item_rows

ITEM_STATUSES = click.Choice(["Available", "Rented", "Maintenance"])

STATUS_LABELS = {
    ServiceStatus.OVERDUE: "OVERDUE",
    ServiceStatus.DUE_SOON: "due soon",
    ServiceStatus.OK: "ok",
    ServiceStatus.NOT_SCHEDULED: "-",
}


def _item_options(f):
    """Options shared by create and update."""
    options = [
        click.option("--location-id", type=int, default=None),
        click.option("--size", type=str, default=None),
        click.option("--serial-no", type=str, default=None),
        click.option("--inventory-code", type=str, default=None),
        click.option("--brand", type=str, default=None),
        click.option("--color", type=str, default=None),
        click.option("--image-url", type=str, default=None),
        click.option("--status", type=ITEM_STATUSES, default=None),
        click.option("--purchase-date", type=str, default=None, help="YYYY-MM-DD"),
        click.option(
            "--requires-service/--no-service", default=None, help="Periodic servicing"
        ),
        click.option("--service-interval-days", type=int, default=None),
        click.option("--last-service-date", type=str, default=None, help="YYYY-MM-DD"),
        click.option(
            "--next-service-date",
            type=str,
            default=None,
            help="YYYY-MM-DD (derived from the interval when omitted)",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _details(item: EquipmentItem) -> str:
    next_date = parse_api_date(item.next_service_date)
    status = service_status(next_date) if item.requires_service else None
    return format_details(
        [
            ("ID", item.id),
            ("Equipment", item.label),
            ("Serial no", item.serial_no),
            ("Inventory code", item.inventory_code),
            ("Brand", item.brand),
            ("Color", item.color),
            ("Location", item.location.name if item.location else item.location_id),
            ("Status", item.status),
            ("Purchased", format_api_date(item.purchase_date)),
            ("Requires service", item.requires_service),
            ("Service interval", item.service_interval_days),
            ("Last service", format_api_date(item.last_service_date)),
            ("Next service", format_api_date(item.next_service_date)),
            ("Service status", STATUS_LABELS[status] if status else None),
        ]
    )


@click.group(name="items")
def items():
    """Manage equipment items (individual units) and their servicing."""


@items.command(name="list")
@page_options
@click.option("--search", type=str, default=None)
@click.option("--equipment-id", type=int, default=None, help="Only units of this type")
@click.option("--status", type=ITEM_STATUSES, default=None)
@json_option
@pass_cli
def list_items(
    cli_ctx: CliContext,
    page: int,
    per_page: Optional[int],
    search: Optional[str],
    equipment_id: Optional[int],
    status: Optional[str],
    as_json: bool,
):
    """List equipment items."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(EquipmentItemService).list(
            page=page,
            per_page=per_page or cli_ctx.config.default_per_page,
            search=search,
            equipment_id=equipment_id,
            status=status,
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("equipment items")
            return

        rows = [
            [i.id, i.label, i.serial_no, i.status, format_api_date(i.next_service_date)]
            for i in result
        ]
        click.echo(format_table(["ID", "Item", "Serial", "Status", "Next service"], rows))
        click.echo(format_page_footer(result, "items"))


@items.command(name="show")
@click.argument("item_id", type=int)
@json_option
@pass_cli
def show_item(cli_ctx: CliContext, item_id: int, as_json: bool):
    """Show one equipment item with its service status."""
    with with_error_handling(cli_ctx.debug):
        item = cli_ctx.service(EquipmentItemService).get(item_id)
        click.echo(to_json(item) if as_json else _details(item))


@items.command(name="create")
@click.option("--equipment-id", type=int, required=True)
@_item_options
@pass_cli
def create_item(cli_ctx: CliContext, **fields):
    """Create one equipment item.

    Example:
        scuba-admin items create --equipment-id 3 --size M --serial-no R-1001 \\
            --requires-service --service-interval-days 365 --purchase-date 2024-02-01
    """
    with with_error_handling(cli_ctx.debug):
        form = EquipmentItemForm(**{k: v for k, v in fields.items() if v is not None})
        item = cli_ctx.service(EquipmentItemService).create(form)
        click.echo(format_success(f"Created equipment item {item.id}"))
        if form.next_service_date:
            click.echo(format_info(f"Next service due {form.next_service_date}"))


@items.command(name="update")
@click.argument("item_id", type=int)
@click.option("--equipment-id", type=int, default=None)
@_item_options
@pass_cli
def update_item(cli_ctx: CliContext, item_id: int, **fields):
    """Update an equipment item. Unspecified fields keep their current value."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(EquipmentItemService)
        values = form_values(service.get(item_id), EquipmentItemForm)
        changed = {k: v for k, v in fields.items() if v is not None}
        if {"service_interval_days", "last_service_date", "purchase_date"} & set(changed):
            # re-derive unless a date was given explicitly
            values.pop("next_service_date", None)
        values.update(changed)
        item = service.update(item_id, EquipmentItemForm(**values))
        click.echo(format_success(f"Updated equipment item {item.id}"))


@items.command(name="delete")
@click.argument("item_id", type=int)
@yes_option
@pass_cli
def delete_item(cli_ctx: CliContext, item_id: int, yes: bool):
    """Delete an equipment item."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"equipment item {item_id}", yes)
        cli_ctx.service(EquipmentItemService).delete(item_id)
        click.echo(format_success(f"Deleted equipment item {item_id}"))


@items.command(name="bulk-create")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--equipment-id", type=int, required=True, help="Equipment type of every unit")
@click.option("--location-id", type=int, default=None)
@click.option("--status", type=ITEM_STATUSES, default="Available", show_default=True)
@click.option("--purchase-date", type=str, default=None, help="YYYY-MM-DD")
@click.option("--requires-service/--no-service", default=False)
@click.option("--service-interval-days", type=int, default=None)
@click.option("--last-service-date", type=str, default=None, help="YYYY-MM-DD")
@click.option("--dry-run", is_flag=True, help="Validate the file without creating anything")
@pass_cli
def bulk_create(cli_ctx: CliContext, csv_file: str, dry_run: bool, **template_fields):
    """Create up to 50 units of one equipment type from a CSV file.

    The CSV has one row per unit with any of the columns size, serial_no,
    inventory_code, brand, color, image_url. Shared values come from the
    options.

    Example:
        scuba-admin items bulk-create fins.csv --equipment-id 4 --purchase-date 2025-01-15
    """
    with with_error_handling(cli_ctx.debug):
        template = EquipmentItemTemplate(
            **{k: v for k, v in template_fields.items() if v is not None}
        )
        rows, report = validate_item_rows(read_table(csv_file))
        for warning in report.get_warnings():
            click.echo(format_warning(str(warning)))
        if not report.is_valid():
            raise DataValidationError(
                f"{csv_file} has {report.error_count} error(s)",
                recovery_hint="Fix the listed rows and run the command again",
                report=report,
            )

        click.echo(format_info(f"{len(rows)} item(s) ready to create"))
        if dry_run:
            click.echo(format_success("Dry run: file is valid"))
            return

        service = cli_ctx.service(EquipmentItemService)
        with create_progress_bar(len(rows), label="Creating items") as bar:
            result = bulk_create_equipment_items(
                service, template, rows, progress=bar_callback(bar)
            )

        click.echo()
        if result.failed:
            click.echo(
                format_table(["Row", "Error"], failures_table(result), max_width=80)
            )
            click.echo(format_error(result.summary("items")))
            if not result.success:
                sys.exit(2)
            return
        click.echo(format_success(result.summary("items")))


@items.command(name="service-history")
@click.argument("item_id", type=int)
@click.option("--page", type=int, default=1, show_default=True)
@json_option
@pass_cli
def service_history(cli_ctx: CliContext, item_id: int, page: int, as_json: bool):
    """List the service records of an equipment item."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(ServiceHistoryService).list(item_id, page=page)
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("service records")
            return

        rows = [
            [
                r.id,
                format_api_date(r.service_date),
                r.service_type,
                r.technician or r.service_provider,
                format_money(r.cost),
                format_api_date(r.next_service_due_date),
            ]
            for r in result
        ]
        click.echo(
            format_table(["ID", "Date", "Type", "By", "Cost", "Next due"], rows)
        )
        click.echo(format_page_footer(result, "records"))


def _service_options(f):
    options = [
        click.option("--date", "service_date", type=str, required=True, help="YYYY-MM-DD"),
        click.option("--type", "service_type", type=str, default=None),
        click.option("--technician", type=str, default=None),
        click.option("--provider", "service_provider", type=str, default=None),
        click.option("--cost", type=float, default=None),
        click.option("--notes", type=str, default=None),
        click.option(
            "--next-due", "next_service_due_date", type=str, default=None, help="YYYY-MM-DD"
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


@items.command(name="add-service")
@click.argument("item_id", type=int)
@_service_options
@click.option("--parts-replaced", type=str, default=None)
@click.option("--warranty-info", type=str, default=None)
@pass_cli
def add_service(cli_ctx: CliContext, item_id: int, **fields):
    """Record a service for one item.

    The next due date defaults to the service date plus the item's interval.
    """
    with with_error_handling(cli_ctx.debug):
        form = ServiceHistoryForm(**{k: v for k, v in fields.items() if v is not None})
        item = cli_ctx.service(EquipmentItemService).get(item_id)
        record = cli_ctx.service(ServiceHistoryService).create(
            item_id, form, service_interval_days=item.service_interval_days
        )
        click.echo(format_success(f"Recorded service {record.id} for {item.label}"))
        if record.next_service_due_date:
            next_due = format_api_date(record.next_service_due_date)
            click.echo(format_info(f"Next service due {next_due}"))


@items.command(name="bulk-service")
@click.argument("item_ids", type=int, nargs=-1, required=True)
@_service_options
@pass_cli
def bulk_service(cli_ctx: CliContext, item_ids: Tuple[int, ...], **fields):
    """Record the same service for several items.

    Example:
        scuba-admin items bulk-service 11 12 13 --date 2025-02-01 --type Annual
    """
    with with_error_handling(cli_ctx.debug):
        form = BulkServiceForm(
            equipment_item_ids=list(item_ids),
            **{k: v for k, v in fields.items() if v is not None},
        )
        result = cli_ctx.service(ServiceHistoryService).bulk_create(form)
        click.echo(format_success(f"Recorded {result.created_count} service record(s)"))
        for error in result.errors:
            item_id = error.get("equipment_item_id", "?")
            click.echo(format_warning(f"{item_id}: {error.get('error', error)}"))


def _all_items(service: EquipmentItemService, per_page: int) -> Iterator[EquipmentItem]:
    page = 1
    while True:
        result = service.list(page=page, per_page=per_page)
        yield from result
        if not result.has_next:
            return
        page += 1


@items.command(name="service-due")
@click.option("--all", "show_all", is_flag=True, help="Include items that are not due")
@json_option
@pass_cli
def service_due(cli_ctx: CliContext, show_all: bool, as_json: bool):
    """List items that are overdue or due for service within 30 days."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(EquipmentItemService)
        due: List[Tuple[EquipmentItem, ServiceStatus]] = []
        for item in _all_items(service, cli_ctx.config.default_per_page):
            if not item.requires_service:
                continue
            status = service_status(parse_api_date(item.next_service_date))
            if show_all or status in (ServiceStatus.OVERDUE, ServiceStatus.DUE_SOON):
                due.append((item, status))

        due.sort(key=lambda pair: pair[0].next_service_date or "9999")
        if as_json:
            click.echo(
                to_json(
                    [
                        {
                            "id": i.id,
                            "label": i.label,
                            "next_service_date": i.next_service_date,
                            "status": s.value,
                        }
                        for i, s in due
                    ]
                )
            )
            return
        if not due:
            click.echo(format_success("No equipment is due for service"))
            return

        rows = [
            [i.id, i.label, i.serial_no, format_api_date(i.next_service_date), STATUS_LABELS[s]]
            for i, s in due
        ]
        click.echo(format_table(["ID", "Item", "Serial", "Next service", "Status"], rows))
        overdue = sum(1 for _, s in due if s == ServiceStatus.OVERDUE)
        if overdue:
            click.echo(format_warning(f"{overdue} item(s) overdue for service"))
