"""
Payment API Routes
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from lawlens.schemas.payment import CreatePaymentRequest, CreatePaymentResponse
from lawlens.services.payment_service import PaymentService
from lawlens.dependencies.database import get_db
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger
from lawlens.config.settings import settings

router = APIRouter()


@router.post("/create-payment", response_model=CreatePaymentResponse)
def create_payment(
    request_data: CreatePaymentRequest,
    db: Session = Depends(get_db),
):
    """Start a paid research request"""
    try:
        result = PaymentService(db).create_checkout(
            request_data.email,
            request_data.question,
            settings.PUBLIC_BASE_URL.rstrip("/"),
        )
        return CreatePaymentResponse(**result)
    except CustomException as e:
        if e.code == ErrorCode.VALIDATION_ERROR:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
        logger.error(f"Payment creation error: {e.message}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create payment")
    except Exception as e:
        logger.error(f"Payment creation error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create payment")


@router.post("/webhooks/stripe")
async def stripe_webhook(request: Request, db: Session = Depends(get_db)):
    """Stripe event receiver"""
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        event = PaymentService.construct_event(payload, signature)
    except CustomException as e:
        logger.error(f"Webhook signature verification failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature")

    try:
        await run_in_threadpool(PaymentService(db).handle_event, event)
    except Exception as e:
        db.rollback()
        logger.error(f"Webhook handler error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook handler failed")

    return {"received": True}
