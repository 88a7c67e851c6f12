"""TMS shipment API client."""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config import TMSCredentials
from constants import DEFAULT_PAGE_SIZE, SHIPMENTS_LIST_PATH, SHIPMENTS_PATH
from exceptions import DecodeError, ExternalAPIError, TMSConnectionError
from integrations.token_manager import TokenManager
from models.load import Load
from models.shipment import (
    ExternalShipmentResponse,
    ShipmentDocument,
    ShipmentListResponse,
)
from services.pagination import PageResult, build_list_params
from services.schema_transformer import from_external_data, to_external_request

logger = logging.getLogger(__name__)


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


class ShipmentClient:
    """Client for the TMS shipments API.

    Every call obtains a token from the shared TokenManager before sending
    anything; no call is retried.
    """

    def __init__(
        self,
        credentials: TMSCredentials,
        token_manager: TokenManager,
        http_client: httpx.AsyncClient,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """
        Initialize shipment client.

        Args:
            credentials: TMS credentials (base URL and API key)
            token_manager: Shared token cache
            http_client: Shared HTTP client
            page_size: Records per listed page
        """
        self.credentials = credentials
        self.token_manager = token_manager
        self.http_client = http_client
        self.page_size = page_size

    async def _headers(self) -> Dict[str, str]:
        token = await self.token_manager.get_token()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "x-api-key": self.credentials.api_key,
        }

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = await self._headers()
        url = f"{self.credentials.base_url}{path}"

        try:
            return await self.http_client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling TMS {method} {path}: {e}")
            raise TMSConnectionError(f"Could not reach TMS ({method} {path}): {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str):
        if response.is_success:
            return
        status_line = _status_line(response)
        logger.error(f"TMS error {action}: {status_line}")
        raise ExternalAPIError(
            f"TMS API error: {status_line} - {response.text}",
            status_code=response.status_code,
            status_line=status_line,
            body=response.text,
        )

    async def create_shipment(self, load: Load) -> ExternalShipmentResponse:
        """
        Create a shipment from a load.

        Args:
            load: Load to submit

        Returns:
            ExternalShipmentResponse

        Raises:
            AuthError: If no token could be obtained
            TMSConnectionError: If the TMS could not be reached
            ExternalAPIError: If the TMS responded with status >= 400; the
                decoded response, when available, is on ``.response``
            DecodeError: If a successful response is not valid JSON
        """
        request = to_external_request(load)
        payload = request.to_payload()

        response = await self._send("POST", SHIPMENTS_PATH, json=payload)
        status_line = _status_line(response)

        try:
            shipment_response = ExternalShipmentResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            if response.status_code >= 400:
                self._raise_for_status(response, "creating shipment")
            raise DecodeError(f"Failed to decode create response: {e}", body=response.text) from e

        if response.status_code >= 400:
            upstream_message = shipment_response.error or shipment_response.message or ""
            logger.error(f"TMS rejected shipment for load {load.freight_load_id}: {status_line}")
            raise ExternalAPIError(
                f"TMS API error: {status_line} - {upstream_message}",
                status_code=response.status_code,
                status_line=status_line,
                body=response.text,
                response=shipment_response,
            )

        logger.info(
            f"Created TMS shipment {shipment_response.shipment_id} "
            f"for load {load.freight_load_id}"
        )
        return shipment_response

    async def list_shipments(
        self,
        page: Optional[int] = 0,
        pickup_date_from: Optional[datetime] = None,
    ) -> PageResult:
        """
        List shipments, one page at a time.

        Args:
            page: 1-based page number; 0 or None for the default first page
                without pagination parameters
            pickup_date_from: Only list shipments picking up at or after this time

        Returns:
            PageResult with mapped shipments and the upstream pagination block

        Raises:
            AuthError: If no token could be obtained
            TMSConnectionError: If the TMS could not be reached
            ExternalAPIError: If the TMS responded with a non-2xx status
            DecodeError: If the body is not a valid shipment list
        """
        params = build_list_params(page, self.page_size, pickup_date_from)
        response = await self._send("GET", SHIPMENTS_LIST_PATH, params=params)
        self._raise_for_status(response, "listing shipments")

        try:
            listing = ShipmentListResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise DecodeError(f"Failed to decode shipment list: {e}", body=response.text) from e

        shipments = [from_external_data(item) for item in listing.details.shipments]
        logger.info(f"Retrieved {len(shipments)} shipments from TMS (page {page or 0})")

        return PageResult(shipments=shipments, pagination=listing.details.pagination)

    async def get_shipment_details(self, shipment_id: str) -> ShipmentDocument:
        """
        Get the full shipment document.

        The detail schema is richer than the list schema and varies, so the
        decoded JSON object is returned as-is.

        Args:
            shipment_id: TMS shipment ID

        Returns:
            Decoded JSON object

        Raises:
            AuthError: If no token could be obtained
            TMSConnectionError: If the TMS could not be reached
            ExternalAPIError: If the TMS responded with a non-2xx status
            DecodeError: If the body is not a JSON object
        """
        response = await self._send("GET", f"{SHIPMENTS_PATH}/{shipment_id}")
        self._raise_for_status(response, f"fetching shipment {shipment_id}")

        try:
            document = response.json()
        except ValueError as e:
            raise DecodeError(f"Failed to decode shipment {shipment_id}: {e}", body=response.text) from e

        if not isinstance(document, dict):
            raise DecodeError(
                f"Expected a JSON object for shipment {shipment_id}, got {type(document).__name__}",
                body=response.text,
            )

        return document
