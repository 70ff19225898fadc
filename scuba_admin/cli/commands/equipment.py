"""Equipment type commands, including spreadsheet import."""

from typing import Optional, Tuple

import click

from scuba_admin.cli.context import (
    CliContext,
    confirm_delete,
    echo_empty,
    json_option,
    page_options,
    pass_cli,
    yes_option,
)
from scuba_admin.cli.error_handlers import with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_info,
    format_page_footer,
    format_success,
    format_table,
    format_warning,
    to_json,
)
from scuba_admin.cli.utils.progress import ProgressTracker
from scuba_admin.models.equipment import EquipmentForm
from scuba_admin.services.equipment_service import EquipmentService


@click.group(name="equipment")
def equipment():
    """Manage equipment types (BCD, regulator, wetsuit, ...)."""


@equipment.command(name="list")
@page_options
@click.option("--category", type=str, default=None)
@click.option("--search", type=str, default=None)
@json_option
@pass_cli
def list_equipment(
    cli_ctx: CliContext,
    page: int,
    per_page: Optional[int],
    category: Optional[str],
    search: Optional[str],
    as_json: bool,
):
    """List equipment types."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(EquipmentService).list(
            page=page,
            per_page=per_page or cli_ctx.config.default_per_page,
            category=category,
            search=search,
        )
        if as_json:
            click.echo(to_json(result))
            return
        if not result.data:
            echo_empty("equipment")
            return

        rows = [
            [e.id, e.name, e.category, ", ".join(e.sizes), ", ".join(e.brands), e.active]
            for e in result
        ]
        click.echo(format_table(["ID", "Name", "Category", "Sizes", "Brands", "Active"], rows))
        click.echo(format_page_footer(result, "equipment types"))


@equipment.command(name="show")
@click.argument("equipment_id", type=int)
@json_option
@pass_cli
def show_equipment(cli_ctx: CliContext, equipment_id: int, as_json: bool):
    """Show one equipment type."""
    with with_error_handling(cli_ctx.debug):
        record = cli_ctx.service(EquipmentService).get(equipment_id)
        if as_json:
            click.echo(to_json(record))
            return
        click.echo(
            format_details(
                [
                    ("ID", record.id),
                    ("Name", record.name),
                    ("Category", record.category),
                    ("Sizes", ", ".join(record.sizes)),
                    ("Brands", ", ".join(record.brands)),
                    ("Active", record.active),
                ]
            )
        )


def _equipment_options(f):
    f = click.option("--inactive", is_flag=True, default=None, help="Mark as inactive")(f)
    f = click.option("--brand", "brands", multiple=True, help="Available brand (repeatable)")(f)
    f = click.option("--size", "sizes", multiple=True, help="Available size (repeatable)")(f)
    return click.option("--category", type=str, default=None)(f)


@equipment.command(name="create")
@click.option("--name", type=str, required=True)
@_equipment_options
@pass_cli
def create_equipment(
    cli_ctx: CliContext,
    name: str,
    category: Optional[str],
    sizes: Tuple[str, ...],
    brands: Tuple[str, ...],
    inactive: Optional[bool],
):
    """Create an equipment type.

    Example:
        scuba-admin equipment create --name BCD --category BCD --size S --size M
    """
    with with_error_handling(cli_ctx.debug):
        form = EquipmentForm(
            name=name,
            category=category,
            sizes=list(sizes) or None,
            brands=list(brands) or None,
            active=False if inactive else None,
        )
        record = cli_ctx.service(EquipmentService).create(form)
        click.echo(format_success(f"Created equipment type {record.id}: {record.name}"))


@equipment.command(name="update")
@click.argument("equipment_id", type=int)
@click.option("--name", type=str, default=None)
@_equipment_options
@pass_cli
def update_equipment(
    cli_ctx: CliContext,
    equipment_id: int,
    name: Optional[str],
    category: Optional[str],
    sizes: Tuple[str, ...],
    brands: Tuple[str, ...],
    inactive: Optional[bool],
):
    """Update an equipment type. Given sizes or brands replace the current lists."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(EquipmentService)
        current = service.get(equipment_id)
        form = EquipmentForm(
            name=name or current.name,
            category=category if category is not None else current.category,
            sizes=list(sizes) if sizes else current.sizes,
            brands=list(brands) if brands else current.brands,
            active=False if inactive else current.active,
        )
        record = service.update(equipment_id, form)
        click.echo(format_success(f"Updated equipment type {record.id}"))


@equipment.command(name="delete")
@click.argument("equipment_id", type=int)
@yes_option
@pass_cli
def delete_equipment(cli_ctx: CliContext, equipment_id: int, yes: bool):
    """Delete an equipment type."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"equipment type {equipment_id}", yes)
        cli_ctx.service(EquipmentService).delete(equipment_id)
        click.echo(format_success(f"Deleted equipment type {equipment_id}"))


@equipment.command(name="import-template")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    default="equipment_import_template.xlsx",
    show_default=True,
)
@pass_cli
def import_template(cli_ctx: CliContext, output: str):
    """Download the spreadsheet template for equipment import."""
    with with_error_handling(cli_ctx.debug):
        path = cli_ctx.service(EquipmentService).download_template(output)
        click.echo(format_success(f"Template saved to {path}"))


@equipment.command(name="import")
@click.argument("spreadsheet", type=click.Path(exists=True, dir_okay=False))
@yes_option
@pass_cli
def import_equipment(cli_ctx: CliContext, spreadsheet: str, yes: bool):
    """Import equipment types from a spreadsheet.

    The server first classifies rows as valid, duplicate or invalid; only
    valid rows are imported after confirmation.

    Example:
        scuba-admin equipment import equipment.xlsx
    """
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(EquipmentService)
        tracker = ProgressTracker(["Uploading for preview", "Importing valid rows"])

        click.echo(format_info(tracker.get_current_message()))
        preview = service.import_preview(spreadsheet)
        tracker.advance(
            f"{len(preview.valid)} valid, {len(preview.duplicates)} duplicate, "
            f"{len(preview.errors)} invalid"
        )
        for row in preview.errors:
            click.echo(format_warning(f"Row {row.get('row', '?')}: {row.get('error') or row}"))
        for row in preview.duplicates:
            click.echo(format_info(f"Duplicate skipped: {row.get('name', row)}"))

        if not preview.valid:
            click.echo(format_warning("Nothing to import"))
            return
        if not yes:
            click.confirm(f"Import {len(preview.valid)} equipment type(s)?", abort=True)

        click.echo(format_info(tracker.get_current_message()))
        summary = service.import_rows(preview.valid)
        tracker.advance()
        for error in summary.errors:
            click.echo(format_warning(f"{error.get('name', 'Row')}: {error.get('error', error)}"))
        click.echo(
            format_success(
                f"Imported {summary.success_count} equipment type(s), "
                f"{summary.error_count} error(s)"
            )
        )
