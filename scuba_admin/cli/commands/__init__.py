"""CLI commands."""

from scuba_admin.cli.commands.agents import agents
from scuba_admin.cli.commands.assignments import assignments
from scuba_admin.cli.commands.auth import auth
from scuba_admin.cli.commands.baskets import baskets
from scuba_admin.cli.commands.bookings import bookings
from scuba_admin.cli.commands.customers import customers
from scuba_admin.cli.commands.equipment import equipment
from scuba_admin.cli.commands.files import files
from scuba_admin.cli.commands.invoices import invoices, payments
from scuba_admin.cli.commands.items import items
from scuba_admin.cli.commands.packages import dive_logs, packages
from scuba_admin.cli.commands.pre_registrations import pre_registrations

__all__ = [
    "agents",
    "assignments",
    "auth",
    "baskets",
    "bookings",
    "customers",
    "dive_logs",
    "equipment",
    "files",
    "invoices",
    "items",
    "packages",
    "payments",
    "pre_registrations",
]
