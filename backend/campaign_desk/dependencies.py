"""
FastAPI dependencies for authentication and the external collaborators.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .database import get_db
from .models.client import Admin, Client
from .services.auth_service import ADMIN, CLIENT, get_auth_service
from .services.email_service import EmailService
from .services.razorpay_service import RazorpayService

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT tokens
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _token_subject(credentials: Optional[HTTPAuthorizationCredentials], role: str) -> str:
    if credentials is None:
        raise _credentials_exception()

    payload = get_auth_service().verify_access_token(credentials.credentials, role)
    if payload is None or payload.get("sub") is None:
        raise _credentials_exception()
    return payload["sub"]


async def get_current_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Client:
    """
    Dependency to get the current authenticated client.

    Raises:
        HTTPException 401: If token is missing, invalid, or client not found
    """
    client_id = _token_subject(credentials, CLIENT)

    client = get_auth_service().get_client_by_id(db, client_id)
    if client is None:
        raise _credentials_exception()

    if not client.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated"
        )

    return client


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Admin:
    """Dependency to get the current authenticated admin."""
    admin_id = _token_subject(credentials, ADMIN)

    admin = get_auth_service().get_admin_by_id(db, admin_id)
    if admin is None or not admin.is_active:
        raise _credentials_exception()

    return admin


def get_payment_gateway(request: Request) -> RazorpayService:
    """Gateway client built at startup."""
    return request.app.state.payment_gateway


def get_email_service(request: Request) -> EmailService:
    """Mailer built at startup."""
    return request.app.state.email_service
