"""
Invoices router. Responses use the ``{success, message, data}`` envelope.
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..dependencies import get_payment_gateway
from ..schemas.campaign import CampaignIdRequest
from ..schemas.common import format_response
from ..schemas.invoice import GenerateInvoiceRequest, InvoiceIdRequest, InvoiceResponse
from ..services import invoice_service
from ..services.razorpay_service import RazorpayService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoice", tags=["invoices"])

INVOICE_SEQUENCE = "invoice"


def _dump(invoice) -> dict:
    issued_by = get_settings().invoice_company_name
    return InvoiceResponse.from_model(invoice, issued_by).model_dump(mode="json", by_alias=True)


@router.post("/generate", status_code=status.HTTP_201_CREATED)
def generate_invoice(
    body: GenerateInvoiceRequest,
    db: Session = Depends(get_db),
    gateway: RazorpayService = Depends(get_payment_gateway),
):
    """Generate an invoice for a campaign whose payment has been approved."""
    settings = get_settings()
    invoice = invoice_service.generate_invoice(
        db,
        gateway,
        campaign_id=body.campaign_id,
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
        sequence_name=INVOICE_SEQUENCE,
        note=settings.invoice_note,
    )
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=format_response(True, "Invoice generated successfully", _dump(invoice)),
    )


@router.post("/getByCampaign")
def get_campaign_invoices(body: CampaignIdRequest, db: Session = Depends(get_db)):
    invoices = invoice_service.list_campaign_invoices(db, body.campaign_id)
    return format_response(
        True,
        "Invoices fetched successfully",
        {"invoices": [_dump(invoice) for invoice in invoices]},
    )


@router.post("/getById")
def get_invoice(body: InvoiceIdRequest, db: Session = Depends(get_db)):
    invoice = invoice_service.get_invoice(db, body.invoice_id)
    return format_response(True, "Invoice fetched successfully", _dump(invoice))
