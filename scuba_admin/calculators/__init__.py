"""Calculator modules for the dive center admin client."""

from scuba_admin.calculators.schedule import (
    DUE_SOON_DAYS,
    ServiceStatus,
    default_return_date,
    next_service_date,
    next_service_due_date,
    package_end_date,
    service_status,
)
from scuba_admin.calculators.time_utils import (
    convert_time_to_minutes,
    dive_duration_minutes,
    format_api_date,
    parse_api_date,
    parse_time,
)

__all__ = [
    # schedule
    "DUE_SOON_DAYS",
    "ServiceStatus",
    "default_return_date",
    "next_service_date",
    "next_service_due_date",
    "package_end_date",
    "service_status",
    # time_utils
    "convert_time_to_minutes",
    "dive_duration_minutes",
    "format_api_date",
    "parse_api_date",
    "parse_time",
]
