"""Tests for the HTTP surface."""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_shipment_client
from api.main import app
from exceptions import AuthError, ExternalAPIError
from models.shipment import ExternalShipmentData, ExternalShipmentResponse, Pagination
from services.pagination import PageResult
from services.schema_transformer import from_external_data
from utils.date_helpers import get_current_utc

LOAD_BODY = {
    "externalTMSLoadID": "EXT-1001",
    "freightLoadID": "FL-1001",
    "status": "Booked",
    "customer": {"externalTMSId": "4521", "name": "Acme Foods"},
    "billTo": {"name": "Acme Foods AP"},
    "pickup": {"name": "Acme DC", "city": "Chicago", "state": "IL"},
    "consignee": {"name": "Store 12", "city": "Dallas", "state": "TX"},
}


class StubShipmentClient:
    """Records calls and returns canned results."""

    def __init__(self):
        self.calls = []
        self.error = None
        self.page = PageResult(
            shipments=[
                from_external_data(ExternalShipmentData.model_validate({
                    "id": 9001,
                    "customId": "SHP-9001",
                    "status": {"code": {"key": "2102", "value": "Covered"}},
                    "customerOrder": [{"id": 5, "customer": {"id": 4521, "name": "Acme Foods"}}],
                }))
            ],
            pagination=Pagination(start=1, page_size=24, total_records_in_page=1, more_available=True),
        )

    async def list_shipments(self, page=0, pickup_date_from=None):
        self.calls.append(("list", page, pickup_date_from))
        if self.error:
            raise self.error
        return self.page

    async def create_shipment(self, load):
        self.calls.append(("create", load))
        if self.error:
            raise self.error
        return ExternalShipmentResponse(shipment_id="SHP-NEW", status="created")

    async def get_shipment_details(self, shipment_id):
        self.calls.append(("get", shipment_id))
        if self.error:
            raise self.error
        return {"id": 9001, "customId": shipment_id}


@pytest.fixture
def stub_client():
    """Stub shipment client installed as the route dependency."""
    stub = StubShipmentClient()
    app.dependency_overrides[get_shipment_client] = lambda: stub
    yield stub
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Test client without running startup."""
    return TestClient(app)


def test_root(client):
    """Test root banner."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["name"] == "TMS Load Bridge"


def test_health_without_session(client):
    """Test health before any token exists."""
    app.state.token_manager = None
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"status": "ok", "tmsSession": "none"}}


def test_health_with_active_session(client, token_manager):
    """Test health with a cached token."""
    token_manager.set_token("seeded", get_current_utc() + timedelta(hours=1))
    app.state.token_manager = token_manager
    try:
        response = client.get("/health")
    finally:
        app.state.token_manager = None

    assert response.json()["data"]["tmsSession"] == "active"


def test_list_loads(client, stub_client):
    """Test the list envelope."""
    response = client.get("/api/loads")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["hasMore"] is True
    assert body["pagination"]["pageSize"] == 24
    assert body["data"][0]["externalTMSLoadID"] == "SHP-9001"
    assert body["data"][0]["customer"]["name"] == "Acme Foods"
    assert body["data"][0]["pickup"]["city"] == "N/A"
    assert "error" not in body
    assert stub_client.calls == [("list", 0, None)]


def test_list_loads_passes_page_and_filter(client, stub_client):
    """Test query parameter parsing."""
    client.get("/api/loads", params={"page": "3", "pickupFrom": "2025-07-01T00:00:00Z"})

    _, page, pickup_from = stub_client.calls[0]
    assert page == 3
    assert pickup_from.isoformat() == "2025-07-01T00:00:00+00:00"


def test_list_loads_without_pagination_block(client, stub_client):
    """Test that hasMore is absent when the TMS sends no pagination."""
    stub_client.page = PageResult()

    body = client.get("/api/loads").json()

    assert body == {"success": True, "data": []}


@pytest.mark.parametrize("page", ["abc", "-2", "1.5"])
def test_list_loads_rejects_bad_page(client, stub_client, page):
    """Test malformed page values."""
    response = client.get("/api/loads", params={"page": page})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert stub_client.calls == []


def test_list_loads_rejects_bad_pickup_filter(client, stub_client):
    """Test malformed pickupFrom values."""
    response = client.get("/api/loads", params={"pickupFrom": "yesterday"})

    assert response.status_code == 400
    assert "pickupFrom" in response.json()["error"]


def test_list_loads_upstream_error(client, stub_client):
    """Test that TMS failures render a 500 envelope."""
    stub_client.error = ExternalAPIError(
        "TMS API error: 500 Internal Server Error - boom",
        status_code=500,
        status_line="500 Internal Server Error",
        body="boom",
    )

    response = client.get("/api/loads")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "TMS API error: 500 Internal Server Error - boom",
    }


def test_create_load(client, stub_client):
    """Test the create envelope."""
    response = client.post("/api/loads", json=LOAD_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Load created successfully in TMS"
    assert body["data"]["externalTMSLoadID"] == "SHP-NEW"
    assert body["data"]["freightLoadID"] == "FL-1001"
    assert body["tmsResponse"]["shipmentId"] == "SHP-NEW"

    _, load = stub_client.calls[0]
    assert load.pickup.city == "Chicago"
    assert load.bill_to.name == "Acme Foods AP"


@pytest.mark.parametrize("missing", ["pickup", "consignee", "freightLoadID", "status"])
def test_create_load_requires_fields(client, stub_client, missing):
    """Test request validation."""
    body = {k: v for k, v in LOAD_BODY.items() if k != missing}

    response = client.post("/api/loads", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("Invalid request data")
    assert stub_client.calls == []


def test_create_load_auth_failure(client, stub_client):
    """Test that OAuth failures render a 500 envelope."""
    stub_client.error = AuthError("TMS OAuth error: 401 Unauthorized", status_line="401 Unauthorized")

    response = client.post("/api/loads", json=LOAD_BODY)

    assert response.status_code == 500
    assert response.json()["error"] == "TMS OAuth error: 401 Unauthorized"


def test_get_shipment(client, stub_client):
    """Test the detail passthrough."""
    response = client.get("/api/shipments/SHP-9001")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"id": 9001, "customId": "SHP-9001"}}


def test_get_shipment_rejects_bad_id(client, stub_client):
    """Test shipment id validation."""
    response = client.get("/api/shipments/bad$id")

    assert response.status_code == 400
    assert stub_client.calls == []


def test_unknown_route_uses_envelope(client):
    """Test 404 rendering."""
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_request_id_is_echoed(client):
    """Test that a caller-supplied request id comes back."""
    response = client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    """Test that a request id is created when none is sent."""
    response = client.get("/")

    assert len(response.headers["X-Request-ID"]) == 32
