"""
Service catalog schemas for API validation.
"""
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from pydantic import Field, field_validator

from .common import CamelModel

# Prices are stored as Numeric(12, 2)
MAX_PRICE = Decimal(10) ** 10


def _check_price(value: str) -> str:
    value = value.strip()
    try:
        price = Decimal(value)
    except InvalidOperation:
        raise ValueError("value must be a number")
    if not price.is_finite() or price < 0:
        raise ValueError("value must be a non-negative number")
    if price.as_tuple().exponent < -2:
        raise ValueError("value must have at most 2 decimal places")
    if price >= MAX_PRICE:
        raise ValueError(f"value must be less than {MAX_PRICE}")
    return value


class ServiceContentIn(CamelModel):
    """A content item as submitted on service creation."""
    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1, description="Unit price, e.g. \"5.00\"")

    @field_validator("key")
    @classmethod
    def key_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("key must not be blank")
        return v

    @field_validator("value")
    @classmethod
    def value_is_price(cls, v: str) -> str:
        return _check_price(v)


class ServiceContentUpdateIn(ServiceContentIn):
    """Content item in an update: known contentId overwrites, no contentId appends."""
    content_id: Optional[str] = None


class ServiceCreate(CamelModel):
    """Schema for creating a service."""
    service_heading: str = Field(..., min_length=1)
    service_description: str = Field(..., min_length=1)
    service_content: List[ServiceContentIn] = []


class ServiceUpdate(CamelModel):
    """Schema for updating a service."""
    service_id: str
    service_heading: Optional[str] = None
    service_description: Optional[str] = None
    service_content: Optional[List[ServiceContentUpdateIn]] = None


class ServiceIdRequest(CamelModel):
    service_id: str


class ServiceContentDeleteRequest(CamelModel):
    service_id: str
    content_id: str


class ServiceContentResponse(CamelModel):
    content_id: str
    key: str
    value: str


class ServiceResponse(CamelModel):
    """Schema for Service API response."""
    service_id: str
    service_heading: str
    service_description: str
    service_content: List[ServiceContentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, service) -> "ServiceResponse":
        return cls(
            service_id=service.id,
            service_heading=service.heading,
            service_description=service.description,
            service_content=[ServiceContentResponse.model_validate(c) for c in service.contents],
            created_at=service.created_at,
            updated_at=service.updated_at,
        )


class ServiceListResponse(CamelModel):
    total: int
    page: int
    total_pages: int
    data: List[ServiceResponse]


class ServiceMutationResponse(CamelModel):
    message: str
    service: ServiceResponse
