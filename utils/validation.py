"""Validation utilities for caller input."""
import re
from datetime import datetime
from typing import Optional

from exceptions import ValidationError
from utils.date_helpers import to_utc

SHIPMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


def validate_page(page: Optional[str]) -> int:
    """
    Validate the ``page`` query parameter.

    Args:
        page: Raw query value, possibly missing or empty

    Returns:
        Page number; 0 means no pagination

    Raises:
        ValidationError: If page is not a non-negative integer
    """
    if page is None or not page.strip():
        return 0

    try:
        value = int(page.strip())
    except ValueError:
        raise ValidationError(f"page must be an integer, got {page!r}")

    if value < 0:
        raise ValidationError(f"page must be 0 or greater, got {value}")

    return value


def validate_shipment_id(shipment_id: str) -> str:
    """
    Validate a TMS shipment ID used in a URL path.

    Args:
        shipment_id: Shipment ID to validate

    Returns:
        Stripped shipment ID

    Raises:
        ValidationError: If the ID is empty or has unexpected characters
    """
    normalized = (shipment_id or "").strip()
    if not normalized:
        raise ValidationError("Shipment ID is required")

    if not SHIPMENT_ID_PATTERN.match(normalized):
        raise ValidationError(f"Invalid shipment ID: {shipment_id}")

    return normalized


def validate_datetime(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 query parameter.

    Args:
        value: Raw query value
        field: Parameter name for error messages

    Returns:
        UTC datetime or None when missing

    Raises:
        ValidationError: If the value is not ISO-8601
    """
    if value is None or not value.strip():
        return None

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 datetime, got {value!r}")

    return to_utc(parsed)
