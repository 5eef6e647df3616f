"""
Payments router: gateway order creation and checkout callback verification.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_email_service, get_payment_gateway
from ..models import Client
from ..schemas.campaign import CampaignResponse
from ..schemas.payment import (
    CreateOrderRequest,
    CreateOrderResponse,
    PaymentResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from ..services import payment_service
from ..services.email_service import EmailService
from ..services.razorpay_service import RazorpayService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment", tags=["payments"])


@router.post("/createOrder", response_model=CreateOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    db: Session = Depends(get_db),
    gateway: RazorpayService = Depends(get_payment_gateway),
):
    """Create a gateway order for ``amount`` (major units) and record the payment."""
    order, payment = await payment_service.create_order(
        db,
        gateway,
        client_id=body.client_id,
        service_id=body.service_id,
        amount=body.amount,
        currency=body.currency,
        receipt=body.receipt,
        campaign_id=body.campaign_id,
    )
    return CreateOrderResponse(order=order, payment_record=PaymentResponse.from_model(payment))


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    body: VerifyPaymentRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    gateway: RazorpayService = Depends(get_payment_gateway),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Verify the checkout callback signature and settle the payment.

    Returns 200 when the payment is (or already was) approved, 400 otherwise.
    """
    result = await payment_service.verify_payment(
        db,
        gateway,
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
    )

    response = VerifyPaymentResponse(
        success=result.success,
        message=result.message,
        payment=PaymentResponse.from_model(result.payment) if result.payment else None,
        campaign=CampaignResponse.from_model(result.campaign) if result.campaign else None,
    )

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json", by_alias=True),
        )

    if result.newly_approved:
        client = db.query(Client).filter(Client.id == result.payment.client_id).first()
        if client is not None:
            background_tasks.add_task(
                email_service.send_payment_confirmation,
                client.email,
                response.payment,
            )

    return response
