"""Application-wide constants.

TMS code tables and scheduling policy used when building shipment requests.
The service flag table and the appointment flex windows were carried over as
observed values; confirm them with product before changing.
"""

# Sentinel for unknown address/contact fields
NOT_AVAILABLE = "N/A"

# API timeouts (in seconds)
API_TIMEOUT_DEFAULT = 30

# OAuth
OAUTH_GRANT_TYPE = "password"
TOKEN_EXPIRY_BUFFER_SECONDS = 60

# TMS endpoints (relative to base URL)
OAUTH_TOKEN_PATH = "/v1/oauth/token"
SHIPMENTS_PATH = "/v1/shipments"
SHIPMENTS_LIST_PATH = "/v1/shipments/list"

# Pagination defaults
DEFAULT_PAGE_SIZE = 24

# Stop types
STOP_TYPE_PICKUP = "1500"
STOP_TYPE_DELIVERY = "1501"
STOP_TYPE_NAMES = {
    STOP_TYPE_PICKUP: "Pickup",
    STOP_TYPE_DELIVERY: "Delivery",
}

# Appointment flex windows (in seconds)
PICKUP_FLEX_SECONDS = 3600
DELIVERY_FLEX_SECONDS = 14400

# Default scheduling windows (in hours)
DEFAULT_START_OFFSET_HOURS = 24
DEFAULT_TRANSIT_HOURS = 72
MIN_TRANSIT_HOURS = 24

DEFAULT_TIMEZONE = "America/New_York"

# Date formats
TMS_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Shipment status
STATUS_COVERED = ("2102", "Covered")
STATUS_NOTES = "Created via load bridge integration"

# Code tables as (key, value)
SCHEDULING_BY_APPOINTMENT = ("9401", "By appointment")
LAYOVER_UNIT_HOURS = ("9900", "hours")
MODE_TRUCKLOAD = ("24105", "TL")
SERVICE_TYPE_ANY = ("24304", "Any")
DISTANCE_UNIT_MILES = ("1540", "mi")
CURRENCY_USD = ("1550", "USD")
ITEM_CATEGORY_OTHER = ("22300", "Other")
ITEM_UNIT_PALLETS = ("6003", "Pallets")
COST_FREIGHT_FLAT = ("1600", "Freight - flat")
EXTERNAL_ID_PURCHASE_ORDER = ("1400", "Purchase order #")
PICKUP_STOP_SERVICE = ("21307", "After hours")
DELIVERY_STOP_SERVICE = ("21407", "Delivery Appointment")

STOP_STATE_OPEN = "OPEN"
STOP_LAYOVER_HOURS = 1

# Service scopes
SERVICE_SCOPE_PICKUP = "pickup"
SERVICE_SCOPE_DELIVERY = "delivery"
SERVICE_SCOPE_SHIPMENT = "shipment"

# Specifications flag -> (service scope, key, value)
SERVICE_FLAG_TABLE = {
    "liftgate_pickup": (SERVICE_SCOPE_PICKUP, "21302", "Liftgate pickup"),
    "liftgate_delivery": (SERVICE_SCOPE_DELIVERY, "21402", "Liftgate delivery"),
    "inside_pickup": (SERVICE_SCOPE_PICKUP, "21303", "Inside pickup"),
    "inside_delivery": (SERVICE_SCOPE_DELIVERY, "21403", "Inside delivery"),
    "tarps": (SERVICE_SCOPE_SHIPMENT, "21501", "Tarps"),
    "oversized": (SERVICE_SCOPE_SHIPMENT, "21502", "Oversized"),
    "hazmat": (SERVICE_SCOPE_SHIPMENT, "21503", "Hazmat"),
    "straps": (SERVICE_SCOPE_SHIPMENT, "21504", "Straps"),
    "permits": (SERVICE_SCOPE_SHIPMENT, "21505", "Permits"),
    "escorts": (SERVICE_SCOPE_SHIPMENT, "21506", "Escorts"),
    "seal": (SERVICE_SCOPE_SHIPMENT, "21507", "Seal"),
    "custom_bonded": (SERVICE_SCOPE_SHIPMENT, "21508", "Customs bonded"),
    "labor": (SERVICE_SCOPE_SHIPMENT, "21509", "Labor"),
}

TEMPERATURE_SERVICE = (SERVICE_SCOPE_SHIPMENT, "21510", "Temperature controlled")

# Party id sent when a load carries no numeric TMS id
DEFAULT_PARTY_ID = 1
DEFAULT_DRIVER_ID = 1
ITEM_NAME = "Freight"
FREIGHT_COST_NOTES = "Freight charges"
