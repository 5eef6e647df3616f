"""
Campaign lifecycle: create, update, status changes and listings.

Every save goes through ``_apply_pricing``, which re-derives all action
snapshots and the total from the current catalog. Concurrent updates of the
same campaign are last-write-wins.
"""
import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, selectinload

from ..exceptions import NotFoundError, ValidationError
from ..models import Campaign, CampaignAction, CampaignStatus, Client
from ..schemas.common import page_offset
from .catalog_service import require_service
from .pricing_service import ActionLine, price_actions

logger = logging.getLogger(__name__)


def get_campaign(db: Session, campaign_id: str) -> Optional[Campaign]:
    """Get a campaign with its actions, or None."""
    return (
        db.query(Campaign)
        .options(selectinload(Campaign.actions))
        .filter(Campaign.id == campaign_id)
        .first()
    )


def require_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign not found")
    return campaign


def _apply_pricing(campaign: Campaign, service, lines: Sequence[ActionLine]) -> None:
    """
    Price ``lines`` and write the results onto ``campaign``.

    Existing action rows keep their ids; new lines get fresh ids. Raises
    before anything is written if any content is missing.
    """
    priced = price_actions(service, lines)

    existing = {action.id: action for action in campaign.actions}
    rows = []
    for position, line in enumerate(priced.actions):
        row = existing.get(line.action_id) if line.action_id else None
        if row is None:
            row = CampaignAction(id=line.action_id or str(uuid.uuid4()))
        row.content_id = line.content_id
        row.content_key = line.content_key
        row.quantity = line.quantity
        row.unit_price = line.unit_price
        row.total_cost = line.total_cost
        row.position = position
        rows.append(row)

    campaign.actions = rows
    campaign.total_amount = priced.total_amount


def create_campaign(
    db: Session,
    client_id: str,
    service_id: str,
    link: str,
    actions: Sequence[ActionLine],
) -> Campaign:
    """
    Create a pending campaign with client and service snapshots.

    Raises:
        NotFoundError: Client or service missing
        InvalidContentError: An action references unknown content; nothing is persisted
    """
    client = db.query(Client).filter(Client.id == client_id).first()
    if client is None:
        raise NotFoundError("Client not found")

    service = require_service(db, service_id)

    campaign = Campaign(
        client_id=client.id,
        client_first_name=client.first_name,
        client_last_name=client.last_name,
        service_id=service.id,
        service_heading=service.heading,
        link=link.strip(),
        status=CampaignStatus.PENDING.value,
    )
    _apply_pricing(campaign, service, list(actions))

    db.add(campaign)
    db.commit()
    db.refresh(campaign)

    logger.info(f"Campaign created: {campaign.id} for client {client_id}, total {campaign.total_amount}")
    return campaign


def update_campaign(
    db: Session,
    campaign_id: str,
    link: Optional[str] = None,
    actions: Optional[Sequence[ActionLine]] = None,
) -> Campaign:
    """
    Update the link and/or merge action changes, then re-price everything.

    ``actions`` entries with an ``action_id`` change that action's quantity
    (and content, when given); entries without one are appended.

    Raises:
        NotFoundError: Campaign missing
        ValidationError: An ``action_id`` does not belong to this campaign
        InvalidContentError: A resulting action references unknown content
    """
    campaign = require_campaign(db, campaign_id)

    lines = [
        ActionLine(content_id=a.content_id, quantity=a.quantity, action_id=a.id)
        for a in campaign.actions
    ]

    if actions is not None:
        by_id = {line.action_id: line for line in lines}
        for change in actions:
            if change.action_id:
                line = by_id.get(change.action_id)
                if line is None:
                    raise ValidationError(f"Action not found: {change.action_id}")
                line.quantity = change.quantity
                if change.content_id:
                    line.content_id = change.content_id
            else:
                lines.append(ActionLine(
                    content_id=change.content_id,
                    quantity=change.quantity,
                    action_id=str(uuid.uuid4()),
                ))

    if link is not None:
        campaign.link = link.strip()

    try:
        _apply_pricing(campaign, require_service(db, campaign.service_id), lines)
    except Exception:
        db.rollback()
        raise

    db.commit()
    db.refresh(campaign)

    logger.info(f"Campaign updated: {campaign.id}, total {campaign.total_amount}")
    return campaign


def set_status(db: Session, campaign_id: str, status: CampaignStatus) -> Tuple[Campaign, bool]:
    """
    Administrative status change.

    Returns:
        The campaign and whether it just became completed (callers notify the
        client only in that case)
    """
    campaign = require_campaign(db, campaign_id)

    newly_completed = (
        status == CampaignStatus.COMPLETED
        and campaign.status != CampaignStatus.COMPLETED.value
    )
    campaign.status = status.value
    db.commit()
    db.refresh(campaign)

    logger.info(f"Campaign {campaign_id} status set to {status.value}")
    return campaign, newly_completed


def delete_campaign(db: Session, campaign_id: str) -> Campaign:
    campaign = require_campaign(db, campaign_id)
    db.delete(campaign)
    db.commit()
    logger.info(f"Campaign deleted: {campaign_id}")
    return campaign


def list_campaigns(db: Session) -> List[Campaign]:
    """All campaigns, newest first."""
    return (
        db.query(Campaign)
        .options(selectinload(Campaign.actions))
        .order_by(desc(Campaign.created_at))
        .all()
    )


def list_client_campaigns(
    db: Session,
    client_id: str,
    status: Optional[CampaignStatus],
    page: int,
    limit: int,
    search: str = "",
) -> Tuple[int, List[Campaign]]:
    """
    One page of a client's campaigns, newest first.

    ``search`` is a case-insensitive substring matched against the service
    heading and the link.

    Returns:
        (total matching rows, campaigns on the requested page)
    """
    if db.query(Client.id).filter(Client.id == client_id).first() is None:
        raise NotFoundError("Client not found")

    query = db.query(Campaign).filter(Campaign.client_id == client_id)
    if status is not None:
        query = query.filter(Campaign.status == status.value)

    search = search.strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Campaign.service_heading.ilike(pattern),
            Campaign.link.ilike(pattern),
        ))

    total = query.count()
    campaigns = (
        query
        .options(selectinload(Campaign.actions))
        .order_by(desc(Campaign.created_at))
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return total, campaigns
