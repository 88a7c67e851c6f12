"""
Shared pytest configuration for all tests.
Sets TMS settings and provides a fake TMS transport.
"""
import asyncio
import os
from datetime import datetime, timezone

import httpx
import pytest

# Set test environment variables before any application imports
os.environ["APP_ENV"] = "testing"
os.environ["TMS_BASE_URL"] = "https://tms.test"
os.environ["TMS_OAUTH_CLIENT_ID"] = "client-id"
os.environ["TMS_OAUTH_CLIENT_SECRET"] = "client-secret"
os.environ["TMS_OAUTH_USERNAME"] = "dispatcher@example.com"
os.environ["TMS_OAUTH_PASSWORD"] = "hunter2"
os.environ["TMS_OAUTH_SCOPE"] = "read+trade"
os.environ["TMS_API_KEY"] = "test-api-key"

from config import TMSCredentials  # noqa: E402
from integrations import ShipmentClient, TokenManager  # noqa: E402
from models import Load  # noqa: E402


class FakeTMS:
    """
    In-memory TMS behind an httpx.MockTransport.

    Routes map (method, path) to a callable returning an httpx.Response, so
    each request gets a fresh response object. Every request is recorded.
    """

    def __init__(self):
        self.requests = []
        self.token_delay = 0.0
        self.routes = {
            ("POST", "/v1/oauth/token"): lambda request: httpx.Response(
                200, json={"access_token": "token-1", "expires_in": 3600}
            ),
        }

    def route(self, method, path, status_code=200, **kwargs):
        """Register a canned response."""
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, **kwargs)

    def route_error(self, method, path, exc):
        """Make a route raise a transport error."""
        def raise_error(request):
            raise exc
        self.routes[(method, path)] = raise_error

    @property
    def token_requests(self):
        return [r for r in self.requests if r.url.path == "/v1/oauth/token"]

    @property
    def api_requests(self):
        return [r for r in self.requests if r.url.path != "/v1/oauth/token"]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/oauth/token" and self.token_delay:
            await asyncio.sleep(self.token_delay)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)


@pytest.fixture
def credentials():
    """TMS credentials matching the test environment."""
    return TMSCredentials(
        base_url="https://tms.test",
        client_id="client-id",
        client_secret="client-secret",
        username="dispatcher@example.com",
        password="hunter2",
        scope="read+trade",
        auth_type="business",
        api_key="test-api-key",
    )


@pytest.fixture
def fake_tms():
    """Fake TMS with a working token endpoint."""
    return FakeTMS()


@pytest.fixture
def http_client(fake_tms):
    """HTTP client wired to the fake TMS."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_tms.handler), timeout=30.0)


@pytest.fixture
def token_manager(credentials, http_client):
    """Token manager using the fake TMS."""
    return TokenManager(credentials, http_client)


@pytest.fixture
def shipment_client(credentials, token_manager, http_client):
    """Shipment client using the fake TMS."""
    return ShipmentClient(credentials, token_manager, http_client)


@pytest.fixture
def sample_load():
    """Load with both appointments, a carrier and a PO number."""
    return Load.model_validate({
        "externalTMSLoadID": "EXT-1001",
        "freightLoadID": "FL-1001",
        "status": "Booked",
        "customer": {
            "externalTMSId": "4521",
            "name": "Acme Foods",
            "city": "Chicago",
            "state": "IL",
        },
        "billTo": {"name": "Acme Foods AP"},
        "pickup": {
            "name": "Acme DC",
            "addressLine1": "100 Dock Rd",
            "city": "Chicago",
            "state": "IL",
            "zipcode": "60601",
            "country": "US",
            "contact": "Dana",
            "phone": "312-555-0100",
            "refNumber": "PU-77",
            "apptTime": "2025-07-10T14:00:00Z",
            "apptNote": "Check in at gate 2",
            "timezone": "America/Chicago",
        },
        "consignee": {
            "name": "Store 12",
            "addressLine1": "9 Market St",
            "city": "Dallas",
            "state": "TX",
            "zipcode": "75201",
            "contact": "Lee",
            "refNumber": "DL-12",
            "apptTime": "2025-07-12T09:30:00Z",
            "timezone": "America/Chicago",
        },
        "carrier": {"name": "Fast Freight LLC", "mcNumber": "MC123"},
        "rateData": {"customerLhRateUsd": 1500.5},
        "specifications": {
            "inPalletCount": 10,
            "poNums": "PO-555",
            "operator": "jsmith",
            "routeMiles": 967.4,
        },
    })


@pytest.fixture
def fixed_now():
    """Reference time for default date calculations."""
    return datetime(2025, 7, 1, 12, 0, 0, tzinfo=timezone.utc)
