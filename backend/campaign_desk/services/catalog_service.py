"""
Service catalog operations: CRUD over services and their content items,
plus price resolution by content id.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ..exceptions import NotFoundError, ServiceNotFoundError
from ..models import Service, ServiceContent
from ..schemas.common import page_offset
from .pricing_service import ResolvedPrice, resolve_content

logger = logging.getLogger(__name__)


def get_service(db: Session, service_id: str) -> Optional[Service]:
    """Get a service with its content items, or None."""
    return (
        db.query(Service)
        .options(selectinload(Service.contents))
        .filter(Service.id == service_id)
        .first()
    )


def require_service(db: Session, service_id: str) -> Service:
    """Get a service or raise ServiceNotFoundError."""
    service = get_service(db, service_id)
    if service is None:
        raise ServiceNotFoundError(service_id)
    return service


def resolve_price(db: Session, service_id: str, content_id: str) -> Optional[ResolvedPrice]:
    """
    Current key and unit price of one content item.

    Raises:
        ServiceNotFoundError: If the service does not exist
    """
    return resolve_content(require_service(db, service_id), content_id)


def create_service(db: Session, heading: str, description: str, contents: List[dict]) -> Service:
    """Create a service. ``contents`` items carry ``key`` and ``value``."""
    service = Service(heading=heading.strip(), description=description.strip())
    for position, item in enumerate(contents):
        service.contents.append(ServiceContent(
            key=item["key"],
            value=item["value"],
            position=position,
        ))
    db.add(service)
    db.commit()
    db.refresh(service)
    logger.info(f"Service created: {service.id} ({len(service.contents)} content items)")
    return service


def list_services(db: Session, page: int, limit: int, search: str = "") -> Tuple[int, List[Service]]:
    """Paginated services, optionally filtered by a case-insensitive substring."""
    query = db.query(Service)

    search = search.strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Service.heading.ilike(pattern),
            Service.description.ilike(pattern),
            Service.contents.any(or_(
                ServiceContent.key.ilike(pattern),
                ServiceContent.value.ilike(pattern),
            )),
        ))

    total = query.count()
    services = (
        query
        .options(selectinload(Service.contents))
        .order_by(Service.created_at)
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return total, services


def update_service(
    db: Session,
    service_id: str,
    heading: Optional[str] = None,
    description: Optional[str] = None,
    contents: Optional[List[dict]] = None,
) -> Service:
    """
    Update heading/description and merge content items.

    Items with a known ``content_id`` are overwritten in place, items with an
    unknown ``content_id`` are ignored, and items without one are appended.
    Campaigns already priced against the old values keep their snapshots.
    """
    service = get_service(db, service_id)
    if service is None:
        raise NotFoundError("Service not found")

    if heading is not None:
        service.heading = heading.strip()
    if description is not None:
        service.description = description.strip()

    if contents is not None:
        next_position = max((c.position for c in service.contents), default=-1) + 1
        for item in contents:
            content_id = item.get("content_id")
            if content_id:
                existing = service.find_content(content_id)
                if existing is None:
                    logger.debug(f"Ignoring unknown contentId {content_id} for service {service_id}")
                    continue
                existing.key = item["key"]
                existing.value = item["value"]
            else:
                service.contents.append(ServiceContent(
                    key=item["key"],
                    value=item["value"],
                    position=next_position,
                ))
                next_position += 1

    db.commit()
    db.refresh(service)
    return service


def delete_service(db: Session, service_id: str) -> None:
    service = get_service(db, service_id)
    if service is None:
        raise NotFoundError("Service not found")
    db.delete(service)
    db.commit()
    logger.info(f"Service deleted: {service_id}")


def delete_service_content(db: Session, service_id: str, content_id: str) -> Service:
    """Remove one content item from a service."""
    service = get_service(db, service_id)
    if service is None:
        raise NotFoundError("Service not found")

    content = service.find_content(content_id)
    if content is None:
        raise NotFoundError(f'Content with id "{content_id}" not found')

    service.contents.remove(content)
    db.commit()
    db.refresh(service)
    return service
