"""
Stats Service
Admin dashboard figures
"""

import math
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from lawlens.models.question import Question
from lawlens.models.payment import Payment
from lawlens.models.bad_decision import BadDecision
from lawlens.core.constants import (
    QUESTION_STATUS,
    PAYMENT_TYPE,
    SUBSCRIPTION_STATUS,
    ADMIN_RECENT_QUESTIONS_LIMIT,
)
from lawlens.schemas.question import RecentQuestion


class StatsService:
    """Aggregate counts for the admin dashboard"""

    def __init__(self, db: Session):
        self.db = db

    def _count_questions(self, status: Optional[str] = None) -> int:
        query = self.db.query(func.count(Question.id))
        if status:
            query = query.filter(Question.status == status)
        return query.scalar() or 0

    def get_stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        total_revenue_cents = self.db.query(func.coalesce(func.sum(Payment.amount_cents), 0)).scalar() or 0
        active_subscriptions = self.db.query(func.count(Payment.id)).filter(
            Payment.payment_type == PAYMENT_TYPE["SUBSCRIPTION"],
            Payment.subscription_status == SUBSCRIPTION_STATUS["ACTIVE"],
        ).scalar() or 0
        one_time_payments = self.db.query(func.count(Payment.id)).filter(
            Payment.payment_type == PAYMENT_TYPE["ONE_TIME"],
        ).scalar() or 0

        total_bad_decisions = self.db.query(func.count(BadDecision.id)).scalar() or 0
        bad_decisions_today = self.db.query(func.count(BadDecision.id)).filter(
            BadDecision.created_at >= start_of_day,
        ).scalar() or 0
        average_risk = self.db.query(func.avg(BadDecision.risk_score)).scalar()

        return {
            "totalQuestions": self._count_questions(),
            "answeredQuestions": self._count_questions(QUESTION_STATUS["ANSWERED"]),
            "pendingQuestions": self._count_questions(QUESTION_STATUS["PENDING"]),
            "totalRevenue": total_revenue_cents / 100,
            "activeSubscriptions": active_subscriptions,
            "oneTimePayments": one_time_payments,
            "totalBadDecisions": total_bad_decisions,
            "badDecisionsToday": bad_decisions_today,
            "averageRiskScore": math.floor(float(average_risk) + 0.5) if average_risk is not None else 0,
        }

    def get_recent_questions(self, limit: int = ADMIN_RECENT_QUESTIONS_LIMIT):
        questions = (
            self.db.query(Question)
            .options(selectinload(Question.payments))
            .order_by(Question.created_at.desc())
            .limit(limit)
            .all()
        )
        return [
            RecentQuestion(
                id=q.id,
                question_text=q.question_text,
                status=q.status,
                created_at=q.created_at,
                payer_emails=[p.user_email for p in q.payments],
            )
            for q in questions
        ]
