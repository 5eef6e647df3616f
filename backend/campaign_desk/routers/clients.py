"""
Client accounts router: registration, login, lookup and password change.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_client
from ..exceptions import NotFoundError
from ..models import Client
from ..schemas.auth import (
    ClientAuthResponse,
    ClientIdRequest,
    ClientListResponse,
    ClientRegister,
    ClientResponse,
    LoginRequest,
    PasswordChange,
)
from ..schemas.common import MessageResponse
from ..services.auth_service import CLIENT, get_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/client", tags=["clients"])


@router.post("/register", response_model=ClientAuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: ClientRegister, db: Session = Depends(get_db)):
    """
    Register a new client account.

    Returns the client id and an access token.
    """
    auth_service = get_auth_service()

    client = auth_service.register_client(
        db,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        password=body.password,
    )
    token = auth_service.create_access_token(client.id, client.email, CLIENT)

    logger.info(f"New client registered: {client.email}")

    return ClientAuthResponse(
        message="Client registered successfully",
        client_id=client.id,
        token=token,
    )


@router.post("/login", response_model=ClientAuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Login with email and password."""
    auth_service = get_auth_service()

    client = auth_service.authenticate_client(db, body.email, body.password)
    token = auth_service.create_access_token(client.id, client.email, CLIENT)

    logger.info(f"Client logged in: {client.email}")

    return ClientAuthResponse(message="Login successful", client_id=client.id, token=token)


@router.post("/getById", response_model=ClientResponse)
def get_client(body: ClientIdRequest, db: Session = Depends(get_db)):
    client = get_auth_service().get_client_by_id(db, body.client_id)
    if client is None:
        raise NotFoundError("Client not found")
    return ClientResponse.from_model(client)


@router.get("/getAll", response_model=ClientListResponse)
def get_all_clients(db: Session = Depends(get_db)):
    clients = db.query(Client).order_by(Client.created_at.desc()).all()
    return ClientListResponse(
        count=len(clients),
        clients=[ClientResponse.from_model(c) for c in clients],
    )


@router.post("/updatePassword", response_model=MessageResponse)
def update_password(
    body: PasswordChange,
    current_client: Client = Depends(get_current_client),
    db: Session = Depends(get_db),
):
    """Change the authenticated client's password."""
    get_auth_service().change_password(db, current_client, body.old_password, body.new_password)
    logger.info(f"Password changed for client {current_client.id}")
    return MessageResponse(message="Password updated successfully")
