"""TMS shipment wire models.

Requests are built from a Load by services.schema_transformer and serialised
with ``by_alias=True, exclude_none=True``; responses are parsed leniently and
ignore keys the bridge does not use.

Shipment detail responses are not modelled. They are returned as a plain
``ShipmentDocument`` (decoded JSON object). Keys callers may rely on:
``id``, ``customId``, ``status``, ``globalRoute``, ``customerOrder``,
``carrierOrder``, ``created`` and ``updated``; anything else is passthrough.
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

ShipmentDocument = Dict[str, Any]


class TMSModel(BaseModel):
    """Base for TMS payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # The TMS sends null for unset values; unset keys take the field default
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_payload(self) -> Dict[str, Any]:
        """Serialise to the JSON body the TMS expects."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Code(TMSModel):
    """TMS key/value code."""
    key: str = ""
    value: str = ""

    @classmethod
    def of(cls, pair: Tuple[str, str]) -> "Code":
        """Build from a (key, value) constant."""
        key, value = pair
        return cls(key=key, value=value)


class TMSDate(TMSModel):
    date: str
    time_zone: str


class Status(TMSModel):
    code: Code = Field(default_factory=Code)
    notes: str = ""
    description: str = ""


class Lane(TMSModel):
    start: str
    end: str


class Location(TMSModel):
    id: Optional[int] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class LayoverTime(TMSModel):
    value: int = 0
    units: Code = Field(default_factory=Code)


class Appointment(TMSModel):
    date: str = ""
    timezone: str = ""
    flex: int = 0
    has_time: bool = True


class Transportation(TMSModel):
    mode: Code = Field(default_factory=Code)
    service_type: Code = Field(default_factory=Code)


class Distance(TMSModel):
    value: int = 0
    units: Code = Field(default_factory=Code)


class RouteStop(TMSModel):
    """A stop in the shipment's global route."""

    global_ship_location_source_id: Optional[str] = None
    name: str = ""
    scheduling_type: Optional[Code] = None
    stop_type: Code = Field(default_factory=Code)
    timezone: str = ""
    location: Location = Field(default_factory=Location)
    segment_sequence: int = 0
    layover_time: Optional[LayoverTime] = None
    sequence: int = 0
    state: Optional[str] = None
    appointment: Optional[Appointment] = None
    appointment_confirmation: Optional[bool] = None
    services: Optional[List[Code]] = None
    po_numbers: Optional[List[str]] = None
    notes: str = ""
    transportation: Optional[Transportation] = None
    fragment_distance: Optional[Distance] = None
    stop_level_fragment_distance: Optional[int] = Field(None, alias="stop_level_fragment_distance")


class SegmentValue(TMSModel):
    sync: bool = True
    value: int = 0
    currency: Code


class ModeInfo(TMSModel):
    operation: int = Field(0, alias="_operation")
    source_segment_sequence: str = "0"
    mode: Code
    service_type: Code
    total_segment_value: SegmentValue


class Party(TMSModel):
    """Customer or carrier reference on an order."""
    id: int = 0
    name: str = ""


class Item(TMSModel):
    item_category: Code
    qty: int
    unit: Code
    name: str
    notes: Optional[str] = None
    operation: int = Field(0, alias="_operation")
    is_hazmat: Optional[bool] = None
    stackable: Optional[bool] = None
    value: Optional[int] = None
    total_value: Optional[int] = None
    currency: Optional[Code] = None


class CostLineItem(TMSModel):
    code: Code
    qty: int
    price: int
    amount: int
    billable: bool = True
    notes: Optional[str] = None


class Costs(TMSModel):
    total_amount: int
    line_item: List[CostLineItem]


class ExternalId(TMSModel):
    type: Code
    value: str
    copy_to_carrier_order: bool = True


class CustomerOrder(TMSModel):
    customer_order_source_id: int = 0
    customer: Party = Field(default_factory=Party)
    items: Optional[List[Item]] = None
    costs: Optional[Costs] = None
    external_ids: Optional[List[ExternalId]] = None


class Driver(TMSModel):
    driver_id: int
    operation: int = Field(0, alias="_operation")
    segment_sequence: int = 0


class CarrierOrder(TMSModel):
    carrier_order_source_id: int = 0
    carrier: Party = Field(default_factory=Party)
    drivers: Optional[List[Driver]] = None


class ShipmentService(TMSModel):
    """Accessorial service requested for the shipment."""
    service_type: str
    code: Code
    notes: Optional[str] = None


class ExternalShipmentRequest(TMSModel):
    """Body of ``POST /v1/shipments``."""

    ltl_shipment: bool = False
    start_date: TMSDate
    end_date: TMSDate
    status: Status
    lane: Lane
    global_route: List[RouteStop]
    skip_distance_calculation: bool = True
    mode_info: Optional[List[ModeInfo]] = None
    customer_order: List[CustomerOrder]
    carrier_order: Optional[List[CarrierOrder]] = None
    services: Optional[List[ShipmentService]] = None
    use_routing_guide: bool = Field(True, alias="use_routing_guide")


class ExternalShipmentResponse(TMSModel):
    """Response of ``POST /v1/shipments``."""

    shipment_id: str = ""
    status: str = ""
    message: Optional[str] = None
    error: Optional[str] = None


class StatusCode(TMSModel):
    key: str = ""
    value: str = ""


class ShipmentDataStatus(TMSModel):
    code: StatusCode = Field(default_factory=StatusCode)


class OrderRef(TMSModel):
    """Customer or carrier order entry on a listed shipment."""
    id: int = 0
    customer: Optional[Party] = None
    carrier: Optional[Party] = None
    deleted: bool = False


class ExternalShipmentData(TMSModel):
    """A shipment as returned by ``GET /v1/shipments/list``."""

    id: int = 0
    custom_id: str = ""
    status: ShipmentDataStatus = Field(default_factory=ShipmentDataStatus)
    customer_order: List[OrderRef] = Field(default_factory=list)
    carrier_order: List[OrderRef] = Field(default_factory=list)
    global_route: List[RouteStop] = Field(default_factory=list)
    created: str = ""
    updated: str = ""
    last_updated_on: str = ""
    created_date: str = ""


class Pagination(TMSModel):
    start: int = 0
    page_size: int = 0
    total_records_in_page: int = 0
    more_available: bool = False


class ShipmentListDetails(TMSModel):
    pagination: Optional[Pagination] = None
    shipments: List[ExternalShipmentData] = Field(default_factory=list)


class ShipmentListResponse(TMSModel):
    """Response of ``GET /v1/shipments/list``."""

    status: str = Field("", alias="Status")
    details: ShipmentListDetails = Field(default_factory=ShipmentListDetails)


class Shipment(TMSModel):
    """Simplified shipment view produced from a listed shipment."""

    shipment_id: str
    status: Status
    lane: Lane
    global_route: List[RouteStop] = Field(default_factory=list)
    customer_order: List[CustomerOrder] = Field(default_factory=list)
    carrier_order: List[CarrierOrder] = Field(default_factory=list)
    start_date: TMSDate
    end_date: TMSDate
    ltl_shipment: bool = False

    @property
    def customer_name(self) -> str:
        if not self.customer_order:
            return ""
        return self.customer_order[0].customer.name

    @property
    def carrier_name(self) -> str:
        if not self.carrier_order:
            return ""
        return self.carrier_order[0].carrier.name
