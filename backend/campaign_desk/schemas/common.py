"""
Shared schema helpers: camelCase base model, money type, pagination, envelopes.
"""
import math
from decimal import Decimal
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel


# Decimals are kept exact in Python and emitted as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base schema exposing camelCase keys on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(BaseModel):
    """Plain success/message body."""
    success: bool = True
    message: str


def page_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-based page."""
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` rows at ``limit`` per page."""
    return math.ceil(total / limit) if limit else 0


def format_response(success: bool, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Standard ``{success, message, data?}`` body."""
    body: Dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return body
