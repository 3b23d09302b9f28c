"""
Payment Service
Stripe hosted checkout for paid questions and webhook reconciliation
"""

import json
from typing import Dict, Any, Optional, Callable
from urllib.parse import quote
import stripe
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lawlens.models.question import Question
from lawlens.models.payment import Payment
from lawlens.core.constants import (
    QUESTION_STATUS,
    PAYMENT_TYPE,
    SUBSCRIPTION_STATUS,
    STRIPE_SUBSCRIPTION_STATUS_MAP,
)
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.validators import validate_email
from lawlens.tasks.notification_tasks import send_new_paid_question_email_task
from lawlens.core.logging import logger
from lawlens.config.settings import settings


def _stripe_ready():
    if not settings.STRIPE_SECRET_KEY:
        raise CustomException(code=ErrorCode.PAYMENT_NOT_CONFIGURED, message="Stripe is not configured")
    stripe.api_key = settings.STRIPE_SECRET_KEY


def _retrieve_customer_email(customer_id: str) -> Optional[str]:
    _stripe_ready()
    customer = stripe.Customer.retrieve(customer_id)
    return getattr(customer, "email", None)


def map_subscription_status(stripe_status: Optional[str]) -> str:
    """Stripe subscription status -> local status; anything unknown is inactive"""
    return STRIPE_SUBSCRIPTION_STATUS_MAP.get(stripe_status, SUBSCRIPTION_STATUS["INACTIVE"])


class PaymentService:
    """Checkout creation and webhook event handling"""

    def __init__(self, db: Session, customer_email_lookup: Optional[Callable[[str], Optional[str]]] = None):
        self.db = db
        self.customer_email_lookup = customer_email_lookup or _retrieve_customer_email

    def create_checkout(self, email: Optional[str], question_text: Optional[str], base_url: str) -> Dict[str, str]:
        """Create a private pending question and a one-item Stripe checkout for it"""
        if not email or not question_text:
            raise CustomException(code=ErrorCode.VALIDATION_ERROR, message="Email and question are required")
        if not validate_email(email):
            raise CustomException(code=ErrorCode.VALIDATION_ERROR, message="Invalid email address")

        _stripe_ready()

        question = Question(
            question_text=question_text,
            status=QUESTION_STATUS["PENDING"],
            is_public=False,
        )
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)

        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                payment_method_types=["card"],
                line_items=[{
                    "price_data": {
                        "currency": settings.PAYMENT_CURRENCY,
                        "product_data": {
                            "name": "Legal Question Research",
                            "description": f'Research and answer for: "{question_text[:100]}..."',
                        },
                        "unit_amount": settings.QUESTION_PRICE_CENTS,
                    },
                    "quantity": 1,
                }],
                customer_email=email,
                metadata={
                    "question_id": question.id,
                    "user_email": email,
                    "question_text": question_text,
                },
                success_url=f"{base_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{base_url}/search?q={quote(question_text)}",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout creation failed: {e}")
            raise CustomException(code=ErrorCode.PAYMENT_FAILED, message="Failed to create payment")

        try:
            self.db.add(Payment(
                user_email=email,
                question_id=question.id,
                amount_cents=settings.QUESTION_PRICE_CENTS,
                currency=settings.PAYMENT_CURRENCY,
                payment_type=PAYMENT_TYPE["ONE_TIME"],
                stripe_payment_id=session.id,
            ))
            self.db.commit()
        except SQLAlchemyError as e:
            # reconciled later by the checkout webhook
            self.db.rollback()
            logger.error(f"Error creating payment record: {e}")

        logger.info(f"Checkout created for question {question.id}")
        return {"checkout_url": session.url, "question_id": question.id}

    @staticmethod
    def construct_event(payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """Verify the Stripe-Signature header and decode the event"""
        if not settings.STRIPE_WEBHOOK_SECRET:
            raise CustomException(code=ErrorCode.PAYMENT_NOT_CONFIGURED, message="Webhook secret is not configured")
        if not signature:
            raise CustomException(code=ErrorCode.WEBHOOK_SIGNATURE_INVALID, message="Missing signature")

        body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        try:
            stripe.WebhookSignature.verify_header(body, signature, settings.STRIPE_WEBHOOK_SECRET)
        except stripe.SignatureVerificationError as e:
            raise CustomException(code=ErrorCode.WEBHOOK_SIGNATURE_INVALID, message=f"Invalid signature: {e}")

        try:
            return json.loads(body)
        except ValueError as e:
            raise CustomException(code=ErrorCode.WEBHOOK_SIGNATURE_INVALID, message=f"Invalid payload: {e}")

    def handle_event(self, event: Dict[str, Any]) -> None:
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}

        if event_type == "checkout.session.completed":
            self.handle_checkout_completed(obj)
        elif event_type == "invoice.payment_succeeded":
            self.handle_subscription_payment(obj)
        elif event_type in ("customer.subscription.updated", "customer.subscription.deleted"):
            self.handle_subscription_update(obj)
        else:
            logger.info(f"Unhandled event type: {event_type}")

    def handle_checkout_completed(self, session: Dict[str, Any]) -> None:
        metadata = session.get("metadata") or {}
        payment_intent = session.get("payment_intent")

        payments = self.db.query(Payment).filter(Payment.stripe_payment_id == session.get("id")).all()
        for payment in payments:
            payment.stripe_payment_id = payment_intent
            payment.stripe_customer_id = session.get("customer")
        self.db.commit()
        logger.info(f"Checkout completed for question {metadata.get('question_id')}")

        if settings.ADMIN_EMAIL:
            try:
                send_new_paid_question_email_task.delay(
                    settings.ADMIN_EMAIL,
                    metadata.get("question_text"),
                    metadata.get("user_email"),
                    metadata.get("question_id"),
                    payment_intent,
                )
            except Exception as e:
                logger.error(f"Failed to queue notification email: {e}")

    def handle_subscription_payment(self, invoice: Dict[str, Any]) -> None:
        customer_id = invoice.get("customer")
        email = self.customer_email_lookup(customer_id) if customer_id else None
        if not email:
            return

        payment = self.db.query(Payment).filter(Payment.stripe_payment_id == invoice.get("id")).first()
        if not payment:
            payment = Payment(stripe_payment_id=invoice.get("id"))
            self.db.add(payment)
        payment.user_email = email
        payment.stripe_customer_id = customer_id
        payment.amount_cents = invoice.get("amount_paid") or 0
        payment.currency = invoice.get("currency") or settings.PAYMENT_CURRENCY
        payment.payment_type = PAYMENT_TYPE["SUBSCRIPTION"]
        payment.subscription_status = SUBSCRIPTION_STATUS["ACTIVE"]
        self.db.commit()
        logger.info(f"Subscription payment recorded for customer {customer_id}")

    def handle_subscription_update(self, subscription: Dict[str, Any]) -> None:
        customer_id = subscription.get("customer")
        email = self.customer_email_lookup(customer_id) if customer_id else None
        if not email:
            return

        status = map_subscription_status(subscription.get("status"))
        self.db.query(Payment).filter(
            Payment.stripe_customer_id == customer_id,
            Payment.payment_type == PAYMENT_TYPE["SUBSCRIPTION"],
        ).update({Payment.subscription_status: status}, synchronize_session=False)
        self.db.commit()
        logger.info(f"Subscription for customer {customer_id} is now {status}")
