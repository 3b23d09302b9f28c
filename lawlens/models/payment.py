"""
Payment Model
"""

from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from lawlens.models.base import BaseModel


class Payment(BaseModel):
    """A one-time question payment or a subscription invoice"""

    __tablename__ = "payments"

    user_email = Column(String(255), nullable=False, index=True, comment="Payer email")
    stripe_payment_id = Column(String(255), nullable=True, index=True, comment="Checkout session, payment intent or invoice id")
    stripe_customer_id = Column(String(255), nullable=True, index=True, comment="Stripe customer id")
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="SET NULL"), nullable=True, index=True, comment="Paid question")
    amount_cents = Column(Integer, nullable=False, comment="Amount in cents")
    currency = Column(String(10), nullable=False, default="usd", comment="Currency")
    payment_type = Column(String(20), nullable=False, default="one_time", comment="one_time/subscription")
    subscription_status = Column(String(20), nullable=True, comment="active/inactive/cancelled/past_due")

    question = relationship("Question", back_populates="payments")

    def __repr__(self):
        return f"<Payment(id='{self.id}', type='{self.payment_type}', amount={self.amount_cents})>"
