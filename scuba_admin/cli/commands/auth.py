"""Login, logout and whoami commands."""

from typing import Optional

import click

from scuba_admin.cli.context import CliContext, pass_cli
from scuba_admin.cli.error_handlers import with_error_handling
from scuba_admin.cli.utils.formatters import (
    format_details,
    format_info,
    format_success,
    format_warning,
)
from scuba_admin.services.auth_service import AuthService


@click.group(name="auth")
def auth():
    """Log in to the dive center API and manage the stored session."""


@auth.command(name="login")
@click.option("--email", type=str, default=None, help="Account email (default: API_EMAIL)")
@click.option(
    "--password",
    type=str,
    default=None,
    help="Account password (default: API_PASSWORD, else prompted)",
)
@pass_cli
def login(cli_ctx: CliContext, email: Optional[str], password: Optional[str]):
    """Log in and keep the session for later commands.

    Example:
        scuba-admin auth login --email staff@divecenter.test
    """
    with with_error_handling(cli_ctx.debug):
        config = cli_ctx.config
        email = email or config.api_email or click.prompt("Email")
        password = password or config.api_password or click.prompt(
            "Password", hide_input=True
        )

        click.echo(format_info(f"Logging in to {config.api_base_url}..."))
        user = cli_ctx.service(AuthService).login(email, password)
        click.echo(format_success(f"Logged in as {user.display_name}"))


@auth.command(name="logout")
@pass_cli
def logout(cli_ctx: CliContext):
    """End the session on the server and forget it locally."""
    with with_error_handling(cli_ctx.debug):
        cli_ctx.service(AuthService).logout()
        click.echo(format_success("Logged out"))


@auth.command(name="whoami")
@click.option(
    "--offline", is_flag=True, help="Show the user saved at login without calling the API"
)
@pass_cli
def whoami(cli_ctx: CliContext, offline: bool):
    """Show the user owning the current session."""
    with with_error_handling(cli_ctx.debug):
        service = cli_ctx.service(AuthService)
        user = service.saved_user() if offline else service.current_user()
        if user is None:
            click.echo(format_warning("No saved session. Run 'scuba-admin auth login'."))
            return
        click.echo(
            format_details(
                [
                    ("Name", user.display_name),
                    ("Email", user.email),
                    ("Role", user.role),
                    ("Dive center", user.dive_center_id),
                ]
            )
        )
