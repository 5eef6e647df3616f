"""
Domain exceptions raised by the service layer.

Routers never build error responses for these by hand: the handlers
registered in ``main.py`` map each class to its HTTP status.
"""
from typing import Any, Dict, List, Optional


class CampaignDeskError(Exception):
    """Base exception for campaign desk errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CampaignDeskError):
    """Malformed or inconsistent input the client can fix"""
    status_code = 400


class NotFoundError(CampaignDeskError):
    """A referenced client, service, campaign, payment or invoice is absent"""
    status_code = 404


class AuthenticationError(CampaignDeskError):
    """Bad credentials or an invalid token"""
    status_code = 401


class ConflictError(CampaignDeskError):
    """A unique natural key is already taken"""
    status_code = 409


class ServiceNotFoundError(NotFoundError):
    """The catalog service used for pricing does not exist"""

    def __init__(self, service_id: str):
        super().__init__(f"Service not found: {service_id}")
        self.service_id = service_id


class InvalidContentError(ValidationError):
    """One or more actions reference content missing from the service"""

    def __init__(self, service_id: str, invalid: List[Dict[str, Any]]):
        refs = ", ".join(f'"{item["contentId"]}"' for item in invalid)
        super().__init__(f"Invalid contentId {refs} for service {service_id}")
        self.service_id = service_id
        self.invalid = invalid


class GatewayError(CampaignDeskError):
    """The payment gateway could not be reached or rejected the call"""
    status_code = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.gateway_status_code = status
