"""
Campaign pricing.

Pricing is an explicit step: the lifecycle calls ``price_actions`` right
before every save, and the function derives all action snapshots and the
grand total from the service as it is now. It touches no database and keeps
no state, so repeated calls with the same inputs give the same result.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence

from ..exceptions import InvalidContentError

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize a number to two decimal places."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ResolvedPrice:
    """Current display key and unit price of a content item."""
    content_id: str
    key: str
    unit_price: Decimal


@dataclass
class ActionLine:
    """A requested action before pricing. ``action_id`` is None for new lines."""
    content_id: str
    quantity: int
    action_id: Optional[str] = None


@dataclass
class PricedAction:
    action_id: Optional[str]
    content_id: str
    content_key: str
    quantity: int
    unit_price: Decimal
    total_cost: Decimal


@dataclass
class PricedCampaign:
    actions: List[PricedAction] = field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")


def resolve_content(service, content_id: str) -> Optional[ResolvedPrice]:
    """
    Look up a content item of a loaded service by its content id.

    Returns:
        The item's key and unit price, or None if the service has no such item
    """
    content = service.find_content(content_id)
    if content is None:
        return None
    return ResolvedPrice(
        content_id=content.content_id,
        key=content.key,
        unit_price=to_money(content.value),
    )


def price_actions(service, lines: Sequence[ActionLine]) -> PricedCampaign:
    """
    Price every action line against the service's content items.

    Args:
        service: Loaded Service with its contents
        lines: Requested actions, in campaign order

    Returns:
        Priced actions and the grand total

    Raises:
        InvalidContentError: If any line references content the service
            does not have. Every offending line is reported, and nothing
            is priced.
    """
    priced = PricedCampaign()
    invalid = []
    grand_total = Decimal("0.00")

    for index, line in enumerate(lines):
        resolved = resolve_content(service, line.content_id)
        if resolved is None:
            invalid.append({"index": index, "actionId": line.action_id, "contentId": line.content_id})
            continue

        line_total = to_money(resolved.unit_price * line.quantity)
        priced.actions.append(PricedAction(
            action_id=line.action_id,
            content_id=resolved.content_id,
            content_key=resolved.key,
            quantity=line.quantity,
            unit_price=resolved.unit_price,
            total_cost=line_total,
        ))
        grand_total += line_total

    if invalid:
        logger.info(f"Rejected {len(invalid)} action(s) for service {service.id}")
        raise InvalidContentError(service.id, invalid)

    priced.total_amount = to_money(grand_total)
    return priced
