"""Shared state passed to every CLI command."""

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, get_args

import click
from pydantic import BaseModel, ValidationError

from scuba_admin.calculators.time_utils import parse_api_date
from scuba_admin.cli.error_handlers import ConfigurationError, DataValidationError
from scuba_admin.cli.utils.formatters import format_info
from scuba_admin.config.settings import ScubaAdminConfig, get_config
from scuba_admin.services.api_client import ApiClient

ServiceT = TypeVar("ServiceT")


class CliContext:
    """
    Lazily built configuration and API client for one CLI invocation.

    Tests pass a ready-made client: ``runner.invoke(cli, args, obj=CliContext(client=mock))``.
    """

    def __init__(
        self,
        debug: bool = False,
        config: Optional[ScubaAdminConfig] = None,
        client: Optional[ApiClient] = None,
    ):
        self.debug = debug
        self._config = config
        self._client = client

    @property
    def config(self) -> ScubaAdminConfig:
        if self._config is None:
            try:
                self._config = get_config()
            except ValidationError as e:
                first = e.errors()[0] if e.errors() else {}
                raise ConfigurationError(
                    str(first.get("msg", e)).replace("Value error, ", ""),
                    recovery_hint="Check your .env file or environment variables",
                ) from e
        return self._config

    @property
    def client(self) -> ApiClient:
        if self._client is None:
            self._client = ApiClient.from_config(self.config)
        return self._client

    def service(self, service_cls: Type[ServiceT]) -> ServiceT:
        """Instantiate a service bound to this invocation's client."""
        return service_cls(self.client)


pass_cli = click.make_pass_decorator(CliContext, ensure=True)


def confirm_delete(what: str, yes: bool) -> None:
    """
    Ask before deleting unless ``--yes`` was given.

    Raises:
        click.Abort: If the user declines
    """
    if yes:
        return
    click.confirm(f"Delete {what}? This cannot be undone", abort=True)


def load_json_data(data: Optional[str], data_file: Optional[str]) -> Dict[str, Any]:
    """
    Read a JSON object given inline (``--data``) or as a file (``--data-file``).

    Raises:
        DataValidationError: If the JSON is malformed or not an object
    """
    if data and data_file:
        raise DataValidationError("Use either --data or --data-file, not both")
    if not data and not data_file:
        return {}

    source = data if data else Path(data_file).read_text(encoding="utf-8")
    try:
        parsed = json.loads(source)
    except json.JSONDecodeError as e:
        raise DataValidationError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e
    if not isinstance(parsed, dict):
        raise DataValidationError("JSON input must be an object")
    return parsed


def merge_options(base: Dict[str, Any], **options: Any) -> Dict[str, Any]:
    """Overlay command-line options that were actually given onto ``base``."""
    merged = dict(base)
    merged.update({k: v for k, v in options.items() if v is not None and v != ()})
    return merged


def echo_empty(noun: str) -> None:
    click.echo()
    click.echo(format_info(f"No {noun} found."))


def json_option(f):
    return click.option("--json", "as_json", is_flag=True, help="Print raw JSON")(f)


def yes_option(f):
    return click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")(f)


def page_options(f):
    f = click.option("--per-page", type=int, default=None, help="Rows per page")(f)
    return click.option("--page", type=int, default=1, show_default=True, help="Page number")(f)


def _is_date(annotation: Any) -> bool:
    return annotation is dt.date or dt.date in get_args(annotation)


def form_values(record: Any, form_cls: Type[BaseModel]) -> Dict[str, Any]:
    """
    Current values of ``record`` for the fields of ``form_cls``.

    API dates arrive as timestamps; fields typed as dates are cut back to
    the calendar date so the form accepts them.
    """
    values: Dict[str, Any] = {}
    for name, field in form_cls.model_fields.items():
        value = getattr(record, name, None)
        if value is None:
            continue
        if isinstance(value, str) and _is_date(field.annotation):
            value = parse_api_date(value)
        values[name] = value
    return values
