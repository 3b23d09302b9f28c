"""
Email Service
Plain SMTP delivery with STARTTLS
"""

import html as html_lib
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Optional, Dict, Any

from lawlens.config.settings import settings
from lawlens.core.exceptions import CustomException, ErrorCode
from lawlens.core.logging import logger


def _text_to_html(text: str) -> str:
    return html_lib.escape(text).replace("\n", "<br>")


def send_email(to: str, subject: str, text: str, html: Optional[str] = None) -> Dict[str, Any]:
    """Send one message; raises CustomException when SMTP is unconfigured or delivery fails"""
    if not settings.SMTP_HOST:
        raise CustomException(code=ErrorCode.EMAIL_NOT_CONFIGURED, message="SMTP_HOST is not configured")

    sender = settings.SMTP_USER or f"no-reply@{settings.SMTP_HOST}"
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((settings.EMAIL_FROM_NAME, sender))
    message["To"] = to
    message["Message-ID"] = make_msgid()
    message.set_content(text)
    message.add_alternative(html or _text_to_html(text), subtype="html")

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            if settings.SMTP_USER and settings.SMTP_PASS:
                server.login(settings.SMTP_USER, settings.SMTP_PASS)
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email send error: {e}")
        raise CustomException(code=ErrorCode.EMAIL_SEND_FAILED, message=f"Email send failed: {e}")

    logger.info(f"Email sent: {message['Message-ID']}")
    return {"success": True, "message_id": message["Message-ID"]}


def build_question_answered_email(question: str, answer: str, source_url: Optional[str] = None) -> Dict[str, str]:
    """Subject and plain-text body telling a payer their question was answered"""
    source_line = f"Source: {source_url}\n\n" if source_url else ""
    text = (
        "Your legal question has been researched and answered!\n\n"
        f"Question: {question}\n\n"
        f"Answer: {answer}\n\n"
        f"{source_line}"
        "Thank you for using LawLens!\n\n"
        "---\n"
        "LawLens Team\n"
        f"{settings.PUBLIC_BASE_URL}\n"
    )
    return {"subject": "Your LawLens Question Has Been Answered", "text": text}


def build_new_paid_question_email(question_text: str, user_email: str, question_id: str, payment_id: Optional[str]) -> Dict[str, str]:
    """Subject and plain-text body telling the admin a paid question is waiting"""
    text = (
        "A new question has been submitted and paid for:\n\n"
        f"Question: {question_text}\n"
        f"Customer Email: {user_email}\n"
        f"Question ID: {question_id}\n"
        f"Payment ID: {payment_id}\n\n"
        "Please research and answer this question in the admin panel:\n"
        f"{settings.PUBLIC_BASE_URL}/admin\n"
    )
    return {"subject": "New Paid Question - LawLens", "text": text}
