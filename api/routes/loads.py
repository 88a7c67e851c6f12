"""Load endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_shipment_client
from api.schemas import envelope
from integrations import ShipmentClient
from logging_config import get_logger
from models import CreateLoadRequest
from services.schema_transformer import shipment_to_load
from utils.validation import validate_datetime, validate_page

logger = get_logger(__name__)

router = APIRouter()


@router.get("/loads")
async def list_loads(
    page: Optional[str] = None,
    pickup_from: Optional[str] = Query(None, alias="pickupFrom"),
    client: ShipmentClient = Depends(get_shipment_client),
):
    """List TMS shipments as loads."""
    page_number = validate_page(page)
    pickup_date_from = validate_datetime(pickup_from, "pickupFrom")

    result = await client.list_shipments(page_number, pickup_date_from=pickup_date_from)
    loads = [
        shipment_to_load(shipment).model_dump(by_alias=True, mode="json")
        for shipment in result.shipments
    ]

    extras = {}
    if result.pagination is not None:
        extras["has_more"] = result.pagination.more_available
        extras["pagination"] = result.pagination.model_dump(by_alias=True)

    return envelope(success=True, data=loads, **extras)


@router.post("/loads", status_code=201)
async def create_load(
    request: CreateLoadRequest,
    client: ShipmentClient = Depends(get_shipment_client),
):
    """Create a load as a TMS shipment."""
    load = request.to_load()

    logger.info("Creating TMS shipment", freight_load_id=load.freight_load_id)
    tms_response = await client.create_shipment(load)

    load.external_tms_load_id = tms_response.shipment_id

    return envelope(
        status_code=201,
        success=True,
        data=load.model_dump(by_alias=True, mode="json"),
        message="Load created successfully in TMS",
        tms_response=tms_response.model_dump(by_alias=True, exclude_none=True),
    )
