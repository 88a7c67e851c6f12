"""Page number to TMS offset translation."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from constants import DEFAULT_PAGE_SIZE
from models.shipment import Pagination, Shipment
from utils.date_helpers import format_tms_datetime


class PageResult(BaseModel):
    """One page of listed shipments.

    ``pagination`` is the upstream block as returned, so ``more_available``
    is never inferred locally.
    """

    shipments: List[Shipment] = Field(default_factory=list)
    pagination: Optional[Pagination] = None

    @property
    def more_available(self) -> bool:
        return bool(self.pagination and self.pagination.more_available)


def to_offset(page: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """
    Convert a 1-based page number to the TMS ``start`` offset.

    The TMS offset is itself 1-based: page 1 starts at 1, page 2 at
    ``page_size + 1``.

    Args:
        page: Page number, 1 or greater
        page_size: Records per page

    Returns:
        Offset for the ``start`` query parameter

    Raises:
        ValueError: If page or page_size is less than 1
    """
    if page < 1:
        raise ValueError(f"page must be 1 or greater, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be 1 or greater, got {page_size}")
    return (page - 1) * page_size + 1


def build_list_params(
    page: Optional[int] = 0,
    page_size: int = DEFAULT_PAGE_SIZE,
    pickup_date_from: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build query parameters for the shipment list endpoint.

    Page 0 (or None) means the default first page and sends no pagination
    parameters at all.

    Args:
        page: 1-based page number, or 0/None for no pagination
        page_size: Records per page
        pickup_date_from: Only list shipments picking up at or after this time

    Returns:
        Query parameter dictionary
    """
    params: Dict[str, Any] = {}

    if page and page > 0:
        params["start"] = to_offset(page, page_size)
        params["pageSize"] = page_size

    if pickup_date_from is not None:
        params["pickupDate[gte]"] = format_tms_datetime(pickup_date_from)

    return params
