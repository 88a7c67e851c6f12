"""FastAPI dependencies."""
from fastapi import Request

from integrations import ShipmentClient


def get_shipment_client(request: Request) -> ShipmentClient:
    """Get the shipment client created at startup."""
    return request.app.state.shipment_client
