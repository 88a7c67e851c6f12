"""Load: the canonical freight record exchanged with callers."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from constants import NOT_AVAILABLE


class LoadModel(BaseModel):
    """Base for load records: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def unset_zero_time(cls, value):
        # Legacy clients send 0001-01-01T00:00:00Z for "no time"
        if isinstance(value, datetime) and value.year == 1:
            return None
        return value


def _sentinel(value):
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str) and not value.strip():
        return NOT_AVAILABLE
    return value


class AddressBlock(LoadModel):
    """Address and contact fields shared by every party on a load.

    Unknown values are always the "N/A" sentinel, never empty or missing.
    """

    external_tms_id: str = Field(NOT_AVAILABLE, alias="externalTMSId")
    name: str = NOT_AVAILABLE
    address_line1: str = NOT_AVAILABLE
    address_line2: str = NOT_AVAILABLE
    city: str = NOT_AVAILABLE
    state: str = NOT_AVAILABLE
    zipcode: str = NOT_AVAILABLE
    country: str = NOT_AVAILABLE
    contact: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE

    @field_validator(
        "external_tms_id", "name", "address_line1", "address_line2", "city",
        "state", "zipcode", "country", "contact", "phone", "email",
        mode="before",
    )
    @classmethod
    def fill_unknown(cls, value):
        return _sentinel(value)


class Customer(AddressBlock):
    ref_number: str = NOT_AVAILABLE

    @field_validator("ref_number", mode="before")
    @classmethod
    def fill_ref_number(cls, value):
        return _sentinel(value)


class BillTo(AddressBlock):
    pass


class StopParty(AddressBlock):
    """Fields common to the pickup and consignee ends of a load."""

    business_hours: str = NOT_AVAILABLE
    ref_number: str = NOT_AVAILABLE
    appt_time: Optional[datetime] = None
    appt_note: str = ""
    timezone: str = NOT_AVAILABLE
    warehouse_id: str = NOT_AVAILABLE

    @field_validator("business_hours", "ref_number", "timezone", "warehouse_id", mode="before")
    @classmethod
    def fill_unknown_stop(cls, value):
        return _sentinel(value)

    @field_validator("appt_note", mode="before")
    @classmethod
    def note_or_empty(cls, value):
        return value or ""


class Pickup(StopParty):
    ready_time: Optional[datetime] = None


class Consignee(StopParty):
    must_deliver: str = NOT_AVAILABLE

    @field_validator("must_deliver", mode="before")
    @classmethod
    def fill_must_deliver(cls, value):
        return _sentinel(value)


class Carrier(LoadModel):
    mc_number: str = ""
    dot_number: str = ""
    name: str = ""
    phone: str = ""
    dispatcher: str = ""
    seal_number: str = ""
    scac: str = ""
    first_driver_name: str = ""
    first_driver_phone: str = ""
    second_driver_name: str = ""
    second_driver_phone: str = ""
    email: str = ""
    dispatch_city: str = ""
    dispatch_state: str = ""
    external_tms_truck_id: str = Field("", alias="externalTMSTruckId")
    external_tms_trailer_id: str = Field("", alias="externalTMSTrailerId")
    confirmation_sent_time: Optional[datetime] = None
    confirmation_received_time: Optional[datetime] = None
    dispatched_time: Optional[datetime] = None
    expected_pickup_time: Optional[datetime] = None
    pickup_start: Optional[datetime] = None
    pickup_end: Optional[datetime] = None
    expected_delivery_time: Optional[datetime] = None
    delivery_start: Optional[datetime] = None
    delivery_end: Optional[datetime] = None
    signed_by: str = ""
    external_tms_id: str = Field("", alias="externalTMSId")


class RateData(LoadModel):
    customer_rate_type: str = ""
    customer_num_hours: float = 0.0
    customer_lh_rate_usd: float = 0.0
    fsc_percent: float = 0.0
    fsc_per_mile: float = 0.0
    carrier_rate_type: str = ""
    carrier_num_hours: float = 0.0
    carrier_lh_rate_usd: float = 0.0
    carrier_max_rate: float = 0.0
    net_profit_usd: float = 0.0
    profit_percent: float = 0.0


class Specifications(LoadModel):
    in_pallet_count: int = 0
    out_pallet_count: int = 0
    num_commodities: int = 0
    total_weight: float = 0.0
    billable_weight: float = 0.0
    po_nums: str = ""
    operator: str = ""
    route_miles: float = 0.0
    min_temp_fahrenheit: Optional[float] = None
    max_temp_fahrenheit: Optional[float] = None

    # Service flags
    liftgate_pickup: bool = False
    liftgate_delivery: bool = False
    inside_pickup: bool = False
    inside_delivery: bool = False
    tarps: bool = False
    oversized: bool = False
    hazmat: bool = False
    straps: bool = False
    permits: bool = False
    escorts: bool = False
    seal: bool = False
    custom_bonded: bool = False
    labor: bool = False


class Load(LoadModel):
    """Canonical freight load."""

    external_tms_load_id: str = Field("", alias="externalTMSLoadID")
    freight_load_id: str = Field("", alias="freightLoadID")
    status: str = ""
    customer: Customer = Field(default_factory=Customer)
    bill_to: BillTo = Field(default_factory=BillTo)
    pickup: Pickup = Field(default_factory=Pickup)
    consignee: Consignee = Field(default_factory=Consignee)
    carrier: Carrier = Field(default_factory=Carrier)
    rate_data: RateData = Field(default_factory=RateData)
    specifications: Specifications = Field(default_factory=Specifications)


class CreateLoadRequest(Load):
    """Request body for creating a load; identity and parties are required."""

    external_tms_load_id: str = Field(..., alias="externalTMSLoadID", min_length=1)
    freight_load_id: str = Field(..., alias="freightLoadID", min_length=1)
    status: str = Field(..., min_length=1)
    customer: Customer
    bill_to: BillTo
    pickup: Pickup
    consignee: Consignee

    def to_load(self) -> Load:
        """Convert to a plain Load."""
        return Load.model_validate(self.model_dump())
