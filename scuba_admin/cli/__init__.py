"""Dive center admin CLI.

This module provides a command-line interface to the dive center admin API:
customers, bookings, equipment and rentals, billing, agents, packages,
dive logs, pre-registrations and stored files.
"""

import click

from scuba_admin import __version__
from scuba_admin.cli.commands import (
    agents,
    assignments,
    auth,
    baskets,
    bookings,
    customers,
    dive_logs,
    equipment,
    files,
    invoices,
    items,
    packages,
    payments,
    pre_registrations,
)
from scuba_admin.cli.context import CliContext
from scuba_admin.config.logging_config import LoggingConfig, configure_logging
from scuba_admin.utils.logging_utils import LogContext, generate_correlation_id


@click.group(help="Dive center admin CLI - manage customers, rentals and billing")
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Verbose logging and full tracebacks")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Dive center admin CLI main entry point."""
    cli_ctx = ctx.ensure_object(CliContext)
    cli_ctx.debug = cli_ctx.debug or debug

    configure_logging(LoggingConfig.from_env(default_level="DEBUG" if debug else "WARNING"))
    ctx.with_resource(
        LogContext(
            correlation_id=generate_correlation_id(),
            command=ctx.invoked_subcommand or "",
        )
    )


# Register commands
cli.add_command(auth)
cli.add_command(customers)
cli.add_command(bookings)
cli.add_command(equipment)
cli.add_command(items)
cli.add_command(assignments)
cli.add_command(baskets)
cli.add_command(invoices)
cli.add_command(payments)
cli.add_command(agents)
cli.add_command(packages)
cli.add_command(dive_logs)
cli.add_command(pre_registrations)
cli.add_command(files)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
