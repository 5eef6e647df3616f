"""
Campaigns router: create, update, list and delete campaigns.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_email_service
from ..models import CampaignStatus
from ..schemas.campaign import (
    CampaignCreate,
    CampaignCreateResponse,
    CampaignDetailResponse,
    CampaignIdRequest,
    CampaignListResponse,
    CampaignPageResponse,
    CampaignResponse,
    CampaignUpdate,
    ClientCampaignsRequest,
)
from ..schemas.common import total_pages
from ..services import campaign_service
from ..services.email_service import EmailService
from ..services.pricing_service import ActionLine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaign", tags=["campaigns"])


@router.post("/create", response_model=CampaignCreateResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    body: CampaignCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Create a campaign priced against the service catalog.

    The confirmation email is sent after the response; its failure does not
    affect the stored campaign.
    """
    campaign = campaign_service.create_campaign(
        db,
        client_id=body.client_id,
        service_id=body.service_id,
        link=body.link,
        actions=[ActionLine(content_id=a.content_id, quantity=a.quantity) for a in body.actions],
    )

    background_tasks.add_task(
        email_service.send_campaign_created,
        campaign.client.email,
        CampaignResponse.from_model(campaign),
    )

    return CampaignCreateResponse(
        message="Campaign created successfully",
        campaign_id=campaign.id,
    )


@router.post("/update", response_model=CampaignDetailResponse)
def update_campaign(body: CampaignUpdate, db: Session = Depends(get_db)):
    """
    Update a campaign's link and/or actions.

    Actions with ``actionId`` change that action's quantity; actions without
    it are added. The campaign is re-priced before saving.
    """
    actions = None
    if body.actions is not None:
        actions = [
            ActionLine(content_id=a.content_id, quantity=a.quantity, action_id=a.action_id)
            for a in body.actions
        ]

    campaign = campaign_service.update_campaign(
        db,
        campaign_id=body.campaign_id,
        link=body.link,
        actions=actions,
    )
    return CampaignDetailResponse(
        message="Campaign updated successfully",
        campaign=CampaignResponse.from_model(campaign),
    )


@router.get("/getAll", response_model=CampaignListResponse)
def get_all_campaigns(db: Session = Depends(get_db)):
    """List all campaigns, newest first."""
    campaigns = campaign_service.list_campaigns(db)
    return CampaignListResponse(
        count=len(campaigns),
        campaigns=[CampaignResponse.from_model(c) for c in campaigns],
    )


def _client_page(db: Session, client_id: str, campaign_status: CampaignStatus, page: int, limit: int, search: str):
    total, campaigns = campaign_service.list_client_campaigns(
        db, client_id, campaign_status, page, limit, search
    )
    return CampaignPageResponse(
        page=page,
        limit=limit,
        total_items=total,
        total_pages=total_pages(total, limit),
        count=len(campaigns),
        campaigns=[CampaignResponse.from_model(c) for c in campaigns],
    )


@router.post("/active", response_model=CampaignPageResponse)
def get_active_campaigns(
    body: ClientCampaignsRequest,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    db: Session = Depends(get_db),
):
    """A client's pending campaigns, paginated."""
    return _client_page(db, body.client_id, CampaignStatus.PENDING, page, limit, search)


@router.post("/previous", response_model=CampaignPageResponse)
def get_previous_campaigns(
    body: ClientCampaignsRequest,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    db: Session = Depends(get_db),
):
    """A client's completed campaigns, paginated."""
    return _client_page(db, body.client_id, CampaignStatus.COMPLETED, page, limit, search)


@router.post("/delete", response_model=CampaignDetailResponse)
def delete_campaign(body: CampaignIdRequest, db: Session = Depends(get_db)):
    """Delete a campaign and its actions."""
    campaign = campaign_service.require_campaign(db, body.campaign_id)
    snapshot = CampaignResponse.from_model(campaign)
    campaign_service.delete_campaign(db, body.campaign_id)
    return CampaignDetailResponse(
        message="Campaign deleted successfully",
        campaign=snapshot,
    )
