"""Stored file commands."""

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
    format_success,
    format_table,
    to_json,
)
from scuba_admin.services.file_service import FileService

ENTITY_TYPES = click.Choice(["customer", "agent", "equipment", "booking", "dive-center"])


def _size(num_bytes: Optional[int]) -> Optional[str]:
    if num_bytes is None:
        return None
    size = float(num_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@click.group(name="files")
def files():
    """Upload and manage files attached to records."""


@files.command(name="upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--entity-type", type=ENTITY_TYPES, required=True)
@click.option("--entity-id", type=int, required=True)
@click.option("--category", type=str, required=True, help="e.g. passport, certification")
@pass_cli
def upload_file(cli_ctx: CliContext, path: str, entity_type: str, entity_id: int, category: str):
    """Upload a file and attach it to a record.

    Example:
        scuba-admin files upload passport.pdf --entity-type customer --entity-id 7 --category passport
    """
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(FileService).upload(path, entity_type, entity_id, category)
        click.echo(format_success(f"Uploaded {result.original_name or path} as file {result.file_id}"))
        if result.url:
            click.echo(result.url)


@files.command(name="list")
@click.option("--entity-type", type=ENTITY_TYPES, required=True)
@click.option("--entity-id", type=int, required=True)
@click.option("--category", type=str, default=None)
@json_option
@pass_cli
def list_files(
    cli_ctx: CliContext,
    entity_type: str,
    entity_id: int,
    category: Optional[str],
    as_json: bool,
):
    """List files attached to a record."""
    with with_error_handling(cli_ctx.debug):
        result = cli_ctx.service(FileService).list(entity_type, entity_id, category)
        if as_json:
            click.echo(to_json(result))
            return
        if not result:
            echo_empty("files")
            return

        rows = [
            [f.id, f.original_name, f.category, _size(f.file_size), format_api_date(f.created_at)]
            for f in result
        ]
        click.echo(format_table(["ID", "Name", "Category", "Size", "Uploaded"], rows))


@files.command(name="show")
@click.argument("file_id", type=int)
@json_option
@pass_cli
def show_file(cli_ctx: CliContext, file_id: int, as_json: bool):
    """Show file metadata."""
    with with_error_handling(cli_ctx.debug):
        info = cli_ctx.service(FileService).get(file_id)
        if as_json:
            click.echo(to_json(info))
            return
        click.echo(
            format_details(
                [
                    ("ID", info.id),
                    ("Name", info.original_name),
                    ("Type", info.mime_type),
                    ("Size", _size(info.file_size)),
                    ("Category", info.category),
                    ("Uploaded by", info.uploaded_by),
                    ("Uploaded", format_api_date(info.created_at)),
                    ("URL", info.url),
                ]
            )
        )


@files.command(name="download")
@click.argument("file_id", type=int)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Defaults to the original file name",
)
@pass_cli
def download_file(cli_ctx: CliContext, file_id: int, output: Optional[str]):
    """Download a stored file."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(FileService)
        if output is None:
            output = service.get(file_id).original_name or f"file-{file_id}"
        path = service.download(file_id, output)
        click.echo(format_success(f"Saved to {path}"))


@files.command(name="delete")
@click.argument("file_id", type=int)
@yes_option
@pass_cli
def delete_file(cli_ctx: CliContext, file_id: int, yes: bool):
    """Delete a stored file."""
    with with_error_handling(cli_ctx.debug):
        confirm_delete(f"file {file_id}", yes)
        cli_ctx.service(FileService).delete(file_id)
        click.echo(format_success(f"Deleted file {file_id}"))


@files.command(name="usage")
@pass_cli
def storage_usage(cli_ctx: CliContext):
    """Show storage used by the dive center."""
    with with_error_handling(cli_ctx.debug):
        usage = cli_ctx.service(FileService).usage()
        click.echo(
            format_details(
                [
                    ("Files", usage.file_count),
                    ("Storage", usage.storage_formatted or _size(usage.storage_bytes)),
                    ("Updated", format_api_date(usage.last_updated)),
                ]
            )
        )
