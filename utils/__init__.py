"""Utility modules."""
from utils.validation import (
    validate_page,
    validate_shipment_id,
    validate_datetime,
)
from utils.date_helpers import (
    get_current_utc,
    to_utc,
    format_tms_datetime,
    parse_tms_datetime,
    resolve_timezone,
)

__all__ = [
    "validate_page",
    "validate_shipment_id",
    "validate_datetime",
    "get_current_utc",
    "to_utc",
    "format_tms_datetime",
    "parse_tms_datetime",
    "resolve_timezone",
]
