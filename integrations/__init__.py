"""TMS API integration clients."""
from integrations.token_manager import TokenManager, OAuthToken
from integrations.shipment_client import ShipmentClient

__all__ = ["TokenManager", "OAuthToken", "ShipmentClient"]
