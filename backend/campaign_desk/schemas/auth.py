"""
Pydantic schemas for client and admin authentication endpoints.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, model_validator

from .common import CamelModel


# Request schemas
class ClientRegister(CamelModel):
    """Schema for client registration."""
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelModel):
    """Schema for client or admin login."""
    email: EmailStr
    password: str


class ClientIdRequest(CamelModel):
    client_id: str = Field(..., min_length=1)


class PasswordChange(CamelModel):
    """Schema for password change."""
    old_password: str
    new_password: str = Field(..., min_length=8)


# Response schemas
class ClientAuthResponse(CamelModel):
    """Token issued on registration or login."""
    message: Optional[str] = None
    client_id: str
    token: str
    token_type: str = "bearer"


class AdminAuthResponse(CamelModel):
    admin_id: str
    token: str
    token_type: str = "bearer"


class ClientResponse(CamelModel):
    """Client response schema. Never carries the password hash."""
    client_id: str
    first_name: str
    last_name: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, client) -> "ClientResponse":
        return cls(
            client_id=client.id,
            first_name=client.first_name,
            last_name=client.last_name,
            email=client.email,
            is_active=client.is_active,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


class ClientListResponse(CamelModel):
    success: bool = True
    count: int
    clients: List[ClientResponse]
