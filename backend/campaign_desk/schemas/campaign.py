"""
Campaign schemas for API validation.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..models.campaign import CampaignStatus
from .common import CamelModel, Money


class ActionRequest(CamelModel):
    """A requested action on campaign creation."""
    content_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class ActionUpdateRequest(CamelModel):
    """An action in an update: with actionId it edits, without it appends."""
    action_id: Optional[str] = None
    content_id: Optional[str] = None
    quantity: int = Field(..., ge=1)

    @model_validator(mode="after")
    def new_action_needs_content(self):
        if not self.action_id and not self.content_id:
            raise ValueError("contentId is required for a new action")
        return self


class CampaignCreate(CamelModel):
    """Schema for creating a campaign."""
    client_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)
    actions: List[ActionRequest] = Field(..., min_length=1)

    @field_validator("link")
    @classmethod
    def link_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("link must not be blank")
        return v


class CampaignUpdate(CamelModel):
    """Schema for updating a campaign."""
    campaign_id: str = Field(..., min_length=1)
    link: Optional[str] = None
    actions: Optional[List[ActionUpdateRequest]] = None

    @field_validator("link")
    @classmethod
    def link_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("link must not be blank")
        return v


class CampaignIdRequest(CamelModel):
    campaign_id: str = Field(..., min_length=1)


class ClientCampaignsRequest(CamelModel):
    client_id: str = Field(..., min_length=1)


class CampaignStatusUpdate(CamelModel):
    """Admin status change."""
    campaign_id: str = Field(..., min_length=1)
    status: CampaignStatus


class ClientName(CamelModel):
    first_name: str
    last_name: str


class ActionResponse(CamelModel):
    action_id: str
    content_id: str
    content_key: str
    quantity: int
    unit_price: Money
    total_cost: Money


class CampaignResponse(CamelModel):
    """Schema for Campaign API response."""
    campaign_id: str
    client_id: str
    client_name: ClientName
    service_id: str
    service_heading: str
    link: str
    actions: List[ActionResponse] = []
    total_amount: Money
    status: CampaignStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, campaign) -> "CampaignResponse":
        return cls(
            campaign_id=campaign.id,
            client_id=campaign.client_id,
            client_name=ClientName(
                first_name=campaign.client_first_name,
                last_name=campaign.client_last_name,
            ),
            service_id=campaign.service_id,
            service_heading=campaign.service_heading,
            link=campaign.link,
            actions=[
                ActionResponse(
                    action_id=a.id,
                    content_id=a.content_id,
                    content_key=a.content_key,
                    quantity=a.quantity,
                    unit_price=a.unit_price,
                    total_cost=a.total_cost,
                )
                for a in campaign.actions
            ],
            total_amount=campaign.total_amount,
            status=campaign.status,
            created_at=campaign.created_at,
            updated_at=campaign.updated_at,
        )


class CampaignCreateResponse(CamelModel):
    success: bool = True
    message: str
    campaign_id: str


class CampaignDetailResponse(CamelModel):
    success: bool = True
    message: str
    campaign: CampaignResponse


class CampaignListResponse(CamelModel):
    success: bool = True
    count: int
    campaigns: List[CampaignResponse]


class CampaignPageResponse(CamelModel):
    success: bool = True
    page: int
    limit: int
    total_items: int
    total_pages: int
    count: int
    campaigns: List[CampaignResponse]
