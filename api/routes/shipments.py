"""Shipment endpoints."""
from fastapi import APIRouter, Depends

from api.dependencies import get_shipment_client
from api.schemas import envelope
from integrations import ShipmentClient
from utils.validation import validate_shipment_id

router = APIRouter()


@router.get("/shipments/{shipment_id}")
async def get_shipment(
    shipment_id: str,
    client: ShipmentClient = Depends(get_shipment_client),
):
    """Get the full TMS shipment document."""
    document = await client.get_shipment_details(validate_shipment_id(shipment_id))
    return envelope(success=True, data=document)
