"""Business logic services."""
from services.pagination import PageResult, to_offset, build_list_params
from services.schema_transformer import (
    to_external_request,
    from_external_data,
    shipment_to_load,
)

__all__ = [
    "PageResult",
    "to_offset",
    "build_list_params",
    "to_external_request",
    "from_external_data",
    "shipment_to_load",
]
