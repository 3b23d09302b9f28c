"""
Notification Tasks
"""

from typing import Optional
from lawlens.tasks.celery_app import celery_app
from lawlens.services.email_service import (
    send_email,
    build_question_answered_email,
    build_new_paid_question_email,
)
from lawlens.core.exceptions import CustomException
from lawlens.core.logging import logger


@celery_app.task
def send_email_notification_task(email: str, subject: str, content: str, html: Optional[str] = None):
    """Send one email; failures are logged and reported in the result"""
    try:
        result = send_email(email, subject, content, html)
        return {"status": "success", "message_id": result.get("message_id")}
    except CustomException as e:
        logger.error(f"Email notification to {email} failed: {e.message}")
        return {"status": "error", "code": e.code, "message": e.message}


@celery_app.task
def send_question_answered_email_task(email: str, question: str, answer: str, source_url: Optional[str] = None):
    """Tell a payer their question has been answered"""
    message = build_question_answered_email(question, answer, source_url)
    return send_email_notification_task(email, message["subject"], message["text"])


@celery_app.task
def send_new_paid_question_email_task(admin_email: str, question_text: str, user_email: str, question_id: str, payment_id: Optional[str] = None):
    """Tell the admin a paid question is waiting for research"""
    message = build_new_paid_question_email(question_text, user_email, question_id, payment_id)
    return send_email_notification_task(admin_email, message["subject"], message["text"])
