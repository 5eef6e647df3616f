"""
Service catalog router.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.common import MessageResponse, total_pages
from ..schemas.service import (
    ServiceContentDeleteRequest,
    ServiceCreate,
    ServiceIdRequest,
    ServiceListResponse,
    ServiceMutationResponse,
    ServiceResponse,
    ServiceUpdate,
)
from ..services import catalog_service

router = APIRouter(prefix="/service", tags=["services"])


@router.post("/create", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(body: ServiceCreate, db: Session = Depends(get_db)):
    """Create a service with its priced content items."""
    service = catalog_service.create_service(
        db,
        heading=body.service_heading,
        description=body.service_description,
        contents=[item.model_dump() for item in body.service_content],
    )
    return ServiceResponse.from_model(service)


@router.get("/getAll", response_model=ServiceListResponse)
def get_all_services(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = "",
    db: Session = Depends(get_db),
):
    """List services with pagination and optional search."""
    total, services = catalog_service.list_services(db, page, limit, search)
    return ServiceListResponse(
        total=total,
        page=page,
        total_pages=total_pages(total, limit),
        data=[ServiceResponse.from_model(s) for s in services],
    )


@router.post("/getById", response_model=ServiceResponse)
def get_service(body: ServiceIdRequest, db: Session = Depends(get_db)):
    """Get a single service by ID."""
    service = catalog_service.require_service(db, body.service_id)
    return ServiceResponse.from_model(service)


@router.post("/update", response_model=ServiceMutationResponse)
def update_service(body: ServiceUpdate, db: Session = Depends(get_db)):
    """Update a service and merge its content items."""
    contents = None
    if body.service_content is not None:
        contents = [item.model_dump() for item in body.service_content]

    service = catalog_service.update_service(
        db,
        body.service_id,
        heading=body.service_heading,
        description=body.service_description,
        contents=contents,
    )
    return ServiceMutationResponse(
        message="Service updated successfully",
        service=ServiceResponse.from_model(service),
    )


@router.post("/delete", response_model=MessageResponse)
def delete_service(body: ServiceIdRequest, db: Session = Depends(get_db)):
    """Delete a service and its content items."""
    catalog_service.delete_service(db, body.service_id)
    return MessageResponse(message="Service deleted successfully")


@router.post("/deleteContent", response_model=ServiceMutationResponse)
def delete_service_content(body: ServiceContentDeleteRequest, db: Session = Depends(get_db)):
    """Delete a single content item from a service."""
    service = catalog_service.delete_service_content(db, body.service_id, body.content_id)
    return ServiceMutationResponse(
        message="Service content deleted successfully",
        service=ServiceResponse.from_model(service),
    )
