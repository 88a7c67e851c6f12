"""Mapping between Loads and TMS shipment payloads.

Pure functions, no I/O. ``to_external_request`` builds the nested create
request; ``from_external_data`` and ``shipment_to_load`` map listed shipments
back to the caller-facing shapes, filling anything the TMS does not return
with the "N/A" sentinel.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple, Union

from constants import (
    COST_FREIGHT_FLAT,
    CURRENCY_USD,
    DEFAULT_DRIVER_ID,
    DEFAULT_PARTY_ID,
    DEFAULT_START_OFFSET_HOURS,
    DEFAULT_TRANSIT_HOURS,
    DELIVERY_FLEX_SECONDS,
    DELIVERY_STOP_SERVICE,
    DISTANCE_UNIT_MILES,
    EXTERNAL_ID_PURCHASE_ORDER,
    FREIGHT_COST_NOTES,
    ITEM_CATEGORY_OTHER,
    ITEM_NAME,
    ITEM_UNIT_PALLETS,
    LAYOVER_UNIT_HOURS,
    MIN_TRANSIT_HOURS,
    MODE_TRUCKLOAD,
    NOT_AVAILABLE,
    PICKUP_FLEX_SECONDS,
    PICKUP_STOP_SERVICE,
    SCHEDULING_BY_APPOINTMENT,
    SERVICE_FLAG_TABLE,
    SERVICE_TYPE_ANY,
    STATUS_COVERED,
    STATUS_NOTES,
    STOP_LAYOVER_HOURS,
    STOP_STATE_OPEN,
    STOP_TYPE_DELIVERY,
    STOP_TYPE_NAMES,
    STOP_TYPE_PICKUP,
    TEMPERATURE_SERVICE,
)
from models.load import (
    Carrier,
    Consignee,
    Customer,
    Load,
    Pickup,
    Specifications,
    StopParty,
)
from models.shipment import (
    Appointment,
    CarrierOrder,
    Code,
    CostLineItem,
    Costs,
    CustomerOrder,
    Distance,
    Driver,
    ExternalId,
    ExternalShipmentData,
    ExternalShipmentRequest,
    Item,
    Lane,
    LayoverTime,
    Location,
    ModeInfo,
    Party,
    RouteStop,
    SegmentValue,
    Shipment,
    ShipmentService,
    Status,
    TMSDate,
    Transportation,
)
from utils.date_helpers import (
    format_tms_datetime,
    get_current_utc,
    parse_tms_datetime,
    resolve_timezone,
    to_utc,
)

logger = logging.getLogger(__name__)


def to_cents(usd: float) -> int:
    """Convert a USD amount to integer cents."""
    return int(round(usd * 100))


def _known(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip() or value == NOT_AVAILABLE:
        return None
    return value


def _party_id(external_id: Optional[str]) -> int:
    value = _known(external_id)
    if value and value.isdigit():
        return int(value)
    return DEFAULT_PARTY_ID


def _lane_point(city: str, state: str) -> str:
    return f"{city}, {state}"


# ---------------------------------------------------------------------------
# Load -> TMS request
# ---------------------------------------------------------------------------

def resolve_schedule(load: Load, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Work out the shipment start and end instants.

    Start is the pickup appointment, else the pickup ready time, else
    ``now`` + 24h. End is the delivery appointment, else start + 72h. An end
    before start is replaced by start + 24h, so end >= start always holds.

    Args:
        load: Load being submitted
        now: Reference time for defaults (default: current UTC time)

    Returns:
        Tuple of (start, end) as UTC datetimes
    """
    if load.pickup.appt_time is not None:
        start = to_utc(load.pickup.appt_time)
    elif load.pickup.ready_time is not None:
        start = to_utc(load.pickup.ready_time)
    else:
        start = to_utc(now or get_current_utc()) + timedelta(hours=DEFAULT_START_OFFSET_HOURS)

    if load.consignee.appt_time is not None:
        end = to_utc(load.consignee.appt_time)
    else:
        end = start + timedelta(hours=DEFAULT_TRANSIT_HOURS)

    if end < start:
        logger.warning(
            f"Delivery {end.isoformat()} precedes pickup {start.isoformat()} "
            f"for load {load.freight_load_id}, extending end date"
        )
        end = start + timedelta(hours=MIN_TRANSIT_HOURS)

    return start, end


def build_location(party: StopParty) -> Location:
    """Build a stop location, leaving out unknown fields."""
    return Location(
        address_line1=_known(party.address_line1),
        address_line2=_known(party.address_line2),
        city=_known(party.city),
        state=_known(party.state),
        zip_code=_known(party.zipcode),
        country=_known(party.country),
        contact_name=_known(party.contact),
        phone=_known(party.phone),
        email=_known(party.email),
    )


def _build_stop(
    party: StopParty,
    stop_type: str,
    sequence: int,
    appointment_date: str,
    flex_seconds: int,
    stop_service: Tuple[str, str],
    po_number: Optional[str],
    source_id: str,
) -> RouteStop:
    timezone = resolve_timezone(party.timezone)

    return RouteStop(
        global_ship_location_source_id=source_id,
        name=f"{party.contact}: {party.ref_number}",
        scheduling_type=Code.of(SCHEDULING_BY_APPOINTMENT),
        stop_type=Code(key=stop_type, value=STOP_TYPE_NAMES[stop_type]),
        timezone=timezone,
        location=build_location(party),
        segment_sequence=0,
        layover_time=LayoverTime(value=STOP_LAYOVER_HOURS, units=Code.of(LAYOVER_UNIT_HOURS)),
        sequence=sequence,
        state=STOP_STATE_OPEN,
        appointment=Appointment(
            date=appointment_date,
            timezone=timezone,
            flex=flex_seconds,
            has_time=True,
        ),
        appointment_confirmation=True,
        services=[Code.of(stop_service)],
        po_numbers=[po_number] if po_number else None,
        notes=party.appt_note,
        transportation=Transportation(
            mode=Code.of(MODE_TRUCKLOAD),
            service_type=Code.of(SERVICE_TYPE_ANY),
        ),
    )


def build_route(load: Load, start: datetime, end: datetime) -> List[RouteStop]:
    """
    Build the two-stop route: pickup (sequence 0) then delivery (sequence 1).

    Args:
        load: Load being submitted
        start: Pickup appointment instant
        end: Delivery appointment instant

    Returns:
        List of exactly two RouteStop objects
    """
    po_number = _known(load.specifications.po_nums)

    pickup = _build_stop(
        load.pickup,
        stop_type=STOP_TYPE_PICKUP,
        sequence=0,
        appointment_date=format_tms_datetime(start),
        flex_seconds=PICKUP_FLEX_SECONDS,
        stop_service=PICKUP_STOP_SERVICE,
        po_number=po_number,
        source_id="pickup-1",
    )
    delivery = _build_stop(
        load.consignee,
        stop_type=STOP_TYPE_DELIVERY,
        sequence=1,
        appointment_date=format_tms_datetime(end),
        flex_seconds=DELIVERY_FLEX_SECONDS,
        stop_service=DELIVERY_STOP_SERVICE,
        po_number=po_number,
        source_id="delivery-1",
    )

    miles = int(round(load.specifications.route_miles))
    if miles > 0:
        delivery.fragment_distance = Distance(value=miles, units=Code.of(DISTANCE_UNIT_MILES))
        delivery.stop_level_fragment_distance = miles

    return [pickup, delivery]


def build_services(specifications: Specifications) -> List[ShipmentService]:
    """
    Map the specification flags to TMS service entries.

    Each true flag in SERVICE_FLAG_TABLE produces one entry; false flags
    produce nothing. A temperature service is added only when either
    temperature bound is nonzero.

    Args:
        specifications: Load specifications

    Returns:
        List of ShipmentService entries, in table order
    """
    services = []

    for flag, (scope, key, value) in SERVICE_FLAG_TABLE.items():
        if getattr(specifications, flag):
            services.append(
                ShipmentService(service_type=scope, code=Code(key=key, value=value))
            )

    low = specifications.min_temp_fahrenheit or 0.0
    high = specifications.max_temp_fahrenheit or 0.0
    if low != 0 or high != 0:
        scope, key, value = TEMPERATURE_SERVICE
        services.append(
            ShipmentService(
                service_type=scope,
                code=Code(key=key, value=value),
                notes=f"{low:g}F to {high:g}F",
            )
        )

    return services


def build_customer_order(load: Load) -> CustomerOrder:
    """Build the customer order: one freight item, flat costs, PO reference."""
    specs = load.specifications
    rate_cents = to_cents(load.rate_data.customer_lh_rate_usd)
    po_number = _known(specs.po_nums)

    item = Item(
        item_category=Code.of(ITEM_CATEGORY_OTHER),
        qty=specs.in_pallet_count,
        unit=Code.of(ITEM_UNIT_PALLETS),
        name=ITEM_NAME,
        notes=f"PO: {specs.po_nums or NOT_AVAILABLE}, Operator: {specs.operator or NOT_AVAILABLE}",
        is_hazmat=specs.hazmat,
        stackable=True,
        value=rate_cents,
        total_value=rate_cents * specs.in_pallet_count,
        currency=Code.of(CURRENCY_USD),
    )

    costs = Costs(
        total_amount=rate_cents,
        line_item=[
            CostLineItem(
                code=Code.of(COST_FREIGHT_FLAT),
                qty=1,
                price=rate_cents,
                amount=rate_cents,
                billable=True,
                notes=FREIGHT_COST_NOTES,
            )
        ],
    )

    external_ids = None
    if po_number:
        external_ids = [
            ExternalId(
                type=Code.of(EXTERNAL_ID_PURCHASE_ORDER),
                value=po_number,
                copy_to_carrier_order=True,
            )
        ]

    return CustomerOrder(
        customer_order_source_id=DEFAULT_PARTY_ID,
        customer=Party(id=_party_id(load.customer.external_tms_id), name=load.customer.name),
        items=[item],
        costs=costs,
        external_ids=external_ids,
    )


def build_carrier_order(carrier: Carrier) -> Optional[CarrierOrder]:
    """Build the carrier order, or None when no carrier is assigned."""
    if not _known(carrier.name):
        return None

    return CarrierOrder(
        carrier_order_source_id=DEFAULT_PARTY_ID,
        carrier=Party(id=_party_id(carrier.external_tms_id), name=carrier.name),
        drivers=[Driver(driver_id=DEFAULT_DRIVER_ID, operation=0, segment_sequence=0)],
    )


def to_external_request(load: Load, now: Optional[datetime] = None) -> ExternalShipmentRequest:
    """
    Transform a Load into the TMS shipment creation request.

    The mapping is total: missing data falls back to defaults rather than
    failing. ``TransformError`` is reserved for required-field validation.

    Args:
        load: Load to submit
        now: Reference time for default dates (default: current UTC time)

    Returns:
        ExternalShipmentRequest ready to serialise with ``to_payload()``
    """
    start, end = resolve_schedule(load, now=now)
    start_zone = resolve_timezone(load.pickup.timezone)
    end_zone = resolve_timezone(load.consignee.timezone)
    rate_cents = to_cents(load.rate_data.customer_lh_rate_usd)

    carrier_order = build_carrier_order(load.carrier)
    services = build_services(load.specifications)
    status_key, status_value = STATUS_COVERED

    request = ExternalShipmentRequest(
        ltl_shipment=False,
        start_date=TMSDate(date=format_tms_datetime(start), time_zone=start_zone),
        end_date=TMSDate(date=format_tms_datetime(end), time_zone=end_zone),
        status=Status(
            code=Code(key=status_key, value=status_value),
            notes=STATUS_NOTES,
            description=status_value,
        ),
        lane=Lane(
            start=_lane_point(load.pickup.city, load.pickup.state),
            end=_lane_point(load.consignee.city, load.consignee.state),
        ),
        global_route=build_route(load, start, end),
        skip_distance_calculation=True,
        mode_info=[
            ModeInfo(
                operation=0,
                source_segment_sequence="0",
                mode=Code.of(MODE_TRUCKLOAD),
                service_type=Code.of(SERVICE_TYPE_ANY),
                total_segment_value=SegmentValue(
                    sync=True,
                    value=rate_cents,
                    currency=Code.of(CURRENCY_USD),
                ),
            )
        ],
        customer_order=[build_customer_order(load)],
        carrier_order=[carrier_order] if carrier_order else None,
        services=services or None,
        use_routing_guide=True,
    )

    logger.debug(
        f"Built shipment request for load {load.freight_load_id}: "
        f"{request.lane.start} -> {request.lane.end}, {len(services)} services"
    )
    return request


# ---------------------------------------------------------------------------
# TMS shipment -> Shipment view / Load
# ---------------------------------------------------------------------------

class StopFound:
    """A route stop of the requested type was present."""

    found = True

    def __init__(self, stop: RouteStop):
        self.stop = stop

    def text(self, extract: Callable[[RouteStop], Optional[str]]) -> str:
        return extract(self.stop) or NOT_AVAILABLE

    def appointment_time(self) -> Optional[datetime]:
        if self.stop.appointment is None:
            return None
        return parse_tms_datetime(self.stop.appointment.date)

    def notes(self) -> str:
        return self.stop.notes

    def po_numbers(self) -> List[str]:
        return [po for po in (self.stop.po_numbers or []) if po]


class StopMissing:
    """No route stop of the requested type was present."""

    found = False

    def text(self, extract: Callable[[RouteStop], Optional[str]]) -> str:
        return NOT_AVAILABLE

    def appointment_time(self) -> Optional[datetime]:
        return None

    def notes(self) -> str:
        return NOT_AVAILABLE

    def po_numbers(self) -> List[str]:
        return []


StopLookup = Union[StopFound, StopMissing]


def find_stop(route: List[RouteStop], stop_type: str) -> StopLookup:
    """Return the first stop whose stop type key matches, or StopMissing."""
    for stop in route:
        if stop.stop_type.key == stop_type:
            return StopFound(stop)
    return StopMissing()


def _lane_from_stop(lookup: StopLookup) -> str:
    city = lookup.text(lambda s: s.location.city)
    state = lookup.text(lambda s: s.location.state)
    if city == NOT_AVAILABLE and state == NOT_AVAILABLE:
        return NOT_AVAILABLE
    return _lane_point(city, state)


def from_external_data(data: ExternalShipmentData) -> Shipment:
    """
    Map a listed TMS shipment to the simplified Shipment view.

    Customer and carrier come from the first entry of each order array;
    empty arrays give empty names. The lane is derived from the route when
    the TMS returns one, otherwise it is "N/A".

    Args:
        data: Shipment entry from the list response

    Returns:
        Shipment view
    """
    customer_order = []
    if data.customer_order:
        first = data.customer_order[0]
        customer = first.customer or Party()
        customer_order.append(
            CustomerOrder(
                customer_order_source_id=first.id,
                customer=Party(id=customer.id, name=customer.name),
            )
        )

    carrier_order = []
    if data.carrier_order:
        first = data.carrier_order[0]
        carrier = first.carrier or Party()
        carrier_order.append(
            CarrierOrder(
                carrier_order_source_id=first.id,
                carrier=Party(id=carrier.id, name=carrier.name),
            )
        )

    pickup = find_stop(data.global_route, STOP_TYPE_PICKUP)
    delivery = find_stop(data.global_route, STOP_TYPE_DELIVERY)

    return Shipment(
        shipment_id=data.custom_id or str(data.id),
        status=Status(
            code=Code(key=data.status.code.key, value=data.status.code.value),
            notes="",
            description=data.status.code.value,
        ),
        lane=Lane(start=_lane_from_stop(pickup), end=_lane_from_stop(delivery)),
        global_route=list(data.global_route),
        customer_order=customer_order,
        carrier_order=carrier_order,
        start_date=TMSDate(date=data.created or NOT_AVAILABLE, time_zone="UTC"),
        end_date=TMSDate(date=data.updated or NOT_AVAILABLE, time_zone="UTC"),
        ltl_shipment=False,
    )


def _stop_party_fields(lookup: StopLookup) -> dict:
    return {
        "address_line1": lookup.text(lambda s: s.location.address_line1),
        "address_line2": lookup.text(lambda s: s.location.address_line2),
        "city": lookup.text(lambda s: s.location.city),
        "state": lookup.text(lambda s: s.location.state),
        "zipcode": lookup.text(lambda s: s.location.zip_code),
        "country": lookup.text(lambda s: s.location.country),
        "contact": lookup.text(lambda s: s.location.contact_name),
        "phone": lookup.text(lambda s: s.location.phone),
        "email": lookup.text(lambda s: s.location.email),
        "timezone": lookup.text(lambda s: s.timezone),
        "appt_note": lookup.notes(),
        "appt_time": lookup.appointment_time(),
    }


def shipment_to_load(shipment: Shipment) -> Load:
    """
    Map a Shipment view to the caller-facing Load.

    Fields the list response does not carry are the "N/A" sentinel, never
    invented values.

    Args:
        shipment: Shipment view from ``from_external_data``

    Returns:
        Load
    """
    pickup = find_stop(shipment.global_route, STOP_TYPE_PICKUP)
    delivery = find_stop(shipment.global_route, STOP_TYPE_DELIVERY)
    po_numbers = pickup.po_numbers() or delivery.po_numbers()

    return Load(
        external_tms_load_id=shipment.shipment_id,
        freight_load_id=shipment.shipment_id,
        status=shipment.status.code.value,
        customer=Customer(
            external_tms_id=f"CUST-{shipment.shipment_id}",
            name=shipment.customer_name,
        ),
        pickup=Pickup(**_stop_party_fields(pickup)),
        consignee=Consignee(**_stop_party_fields(delivery)),
        carrier=Carrier(name=shipment.carrier_name),
        specifications=Specifications(
            po_nums=", ".join(po_numbers) if po_numbers else NOT_AVAILABLE,
            operator=NOT_AVAILABLE,
        ),
    )
