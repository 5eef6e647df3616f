"""
Admin router: login, password change and campaign status management.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_admin, get_email_service
from ..models import Admin
from ..schemas.auth import AdminAuthResponse, LoginRequest, PasswordChange
from ..schemas.campaign import CampaignDetailResponse, CampaignResponse, CampaignStatusUpdate
from ..schemas.common import MessageResponse
from ..services import campaign_service
from ..services.auth_service import ADMIN, get_auth_service
from ..services.email_service import EmailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=AdminAuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    auth_service = get_auth_service()

    admin = auth_service.authenticate_admin(db, body.email, body.password)
    token = auth_service.create_access_token(admin.id, admin.email, ADMIN)

    logger.info(f"Admin logged in: {admin.email}")

    return AdminAuthResponse(admin_id=admin.id, token=token)


@router.post("/updateStatus", response_model=CampaignDetailResponse)
def update_campaign_status(
    body: CampaignStatusUpdate,
    background_tasks: BackgroundTasks,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Set a campaign's status.

    The client is emailed only when the campaign moves into ``completed``.
    """
    campaign, newly_completed = campaign_service.set_status(db, body.campaign_id, body.status)

    if newly_completed and campaign.client is not None:
        background_tasks.add_task(
            email_service.send_campaign_completed,
            campaign.client.email,
            campaign.client_first_name,
            campaign.service_heading,
        )

    logger.info(f"Admin {current_admin.email} set campaign {campaign.id} to {campaign.status}")

    return CampaignDetailResponse(
        message="Campaign status updated successfully",
        campaign=CampaignResponse.from_model(campaign),
    )


@router.post("/updatePassword", response_model=MessageResponse)
def update_password(
    body: PasswordChange,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Change the authenticated admin's password."""
    get_auth_service().change_password(db, current_admin, body.old_password, body.new_password)
    return MessageResponse(message="Password updated successfully")
