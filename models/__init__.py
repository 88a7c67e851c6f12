"""Domain and TMS wire models."""
from models.load import (
    Load,
    CreateLoadRequest,
    Customer,
    BillTo,
    Pickup,
    Consignee,
    Carrier,
    RateData,
    Specifications,
)
from models.shipment import (
    ExternalShipmentRequest,
    ExternalShipmentResponse,
    ExternalShipmentData,
    ShipmentListResponse,
    Pagination,
    RouteStop,
    Shipment,
    ShipmentDocument,
)

__all__ = [
    "Load",
    "CreateLoadRequest",
    "Customer",
    "BillTo",
    "Pickup",
    "Consignee",
    "Carrier",
    "RateData",
    "Specifications",
    "ExternalShipmentRequest",
    "ExternalShipmentResponse",
    "ExternalShipmentData",
    "ShipmentListResponse",
    "Pagination",
    "RouteStop",
    "Shipment",
    "ShipmentDocument",
]
