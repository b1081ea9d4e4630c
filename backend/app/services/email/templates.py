"""Email rendering.

Each notification type that warrants an email maps to one of five layouts and a
context pulled out of the notification's ``data`` payload. Types without a mapping
render to ``None``: they are in-app only and no email is attempted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import lru_cache
from html import unescape
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.utils import StringEnum
from app.domain.enums.notification import NotificationType
from app.domain.notification import DomainNotification
from app.domain.user import DomainRecipient


TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates" / "email"


class EmailTemplate(StringEnum):
    TRANSACTIONAL = "transactional"
    SECURITY = "security"
    COMMUNICATION = "communication"
    COURSE = "course"
    SYSTEM = "system"


@dataclass(frozen=True)
class Branding:
    name: str = "Educademy"
    app_url: str = "https://educademy.com"


@dataclass
class EmailSpec:
    """Template selection for one notification: subject line, layout and layout context."""

    subject: str
    template: EmailTemplate
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class EmailContent:
    subject: str
    html: str
    text: str


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return list(value) if isinstance(value, (list, tuple)) else []


def _money(data: dict[str, Any]) -> dict[str, Any]:
    return {"amount": data.get("amount"), "currency": data.get("currency") or "INR"}


def select_template(notification: DomainNotification) -> EmailSpec | None:
    """Map a notification to its email layout, or None when the type is never emailed."""
    data = notification.data or {}

    match notification.notification_type:
        case NotificationType.PAYMENT_CONFIRMED:
            return EmailSpec("Payment Confirmed", EmailTemplate.TRANSACTIONAL, {
                "title": "Payment Successful",
                "subtitle": "Your course purchase has been confirmed",
                "message": "Thank you for your purchase! You now have access to your course.",
                "transaction_type": "success",
                **_money(data),
                "transaction_id": data.get("transactionId"),
                "action_button": "Access Course",
                "action_url": data.get("courseUrl"),
                "details": _list(data, "details"),
            })
        case NotificationType.PAYMENT_FAILED:
            return EmailSpec("Payment Failed", EmailTemplate.TRANSACTIONAL, {
                "title": "Payment Failed",
                "subtitle": "Your payment could not be processed",
                "message": "We were unable to process your payment. Please try again.",
                "transaction_type": "failed",
                **_money(data),
                "action_button": "Retry Payment",
                "action_url": data.get("retryUrl"),
                "details": _list(data, "details"),
            })
        case NotificationType.SECURITY_ALERT:
            return EmailSpec("Security Alert", EmailTemplate.SECURITY, {
                "title": "Security Alert",
                "subtitle": "Unusual activity detected on your account",
                "message": notification.message,
                "alert_type": "warning",
                "action_button": "Secure Account",
                "action_url": data.get("securityUrl"),
                "details": _list(data, "details"),
                "security_tips": _list(data, "securityTips"),
                "footer_note": "If this wasn't you, please secure your account immediately.",
            })
        case NotificationType.ASSIGNMENT_GRADED:
            return EmailSpec("Assignment Graded", EmailTemplate.COMMUNICATION, {
                "title": "Assignment Graded",
                "subtitle": "Your instructor has reviewed your work",
                "message": "Your assignment has been graded and feedback is available.",
                "communication_type": "graded",
                "course_name": data.get("courseName"),
                "sender_name": data.get("instructorName"),
                "grade": data.get("grade"),
                "feedback": data.get("feedback"),
                "action_button": "View Details",
                "action_url": data.get("assignmentUrl"),
            })
        case NotificationType.CERTIFICATE_READY:
            return EmailSpec("Certificate Ready", EmailTemplate.COURSE, {
                "title": "Certificate Ready!",
                "subtitle": "Congratulations on completing your course",
                "message": "Your course completion certificate is now available for download.",
                "course_type": "completed",
                "course_name": data.get("courseName"),
                "certificate_url": data.get("certificateUrl"),
                "action_button": "Download Certificate",
                "action_url": data.get("certificateUrl"),
                "achievements": _list(data, "achievements"),
            })
        case NotificationType.COURSE_APPROVED:
            return EmailSpec("Course Approved", EmailTemplate.COURSE, {
                "title": "Course Approved!",
                "subtitle": "Your course is now live",
                "message": "Congratulations! Your course has been reviewed and approved.",
                "course_type": "published",
                "course_name": data.get("courseName"),
                "action_button": "View Course",
                "action_url": data.get("courseUrl"),
                "achievements": _list(data, "achievements"),
            })
        case NotificationType.COURSE_REJECTED:
            return EmailSpec("Course Review Required", EmailTemplate.COURSE, {
                "title": "Course Under Review",
                "subtitle": "Your course needs some improvements",
                "message": "Please address the following items before resubmission.",
                "course_type": "rejected",
                "course_name": data.get("courseName"),
                "action_button": "Edit Course",
                "action_url": data.get("editUrl"),
                "suggestions": _list(data, "suggestions"),
            })
        case NotificationType.NEW_STUDENT_ENROLLED:
            return EmailSpec("New Student Enrolled", EmailTemplate.COURSE, {
                "title": "New Student Enrolled",
                "subtitle": "Someone just joined your course",
                "message": "Great news! A new student has enrolled in your course.",
                "course_type": "enrolled",
                "course_name": data.get("courseName"),
                "action_button": "View Analytics",
                "action_url": data.get("analyticsUrl"),
            })
        case NotificationType.REFUND_PROCESSED:
            return EmailSpec("Refund Processed", EmailTemplate.TRANSACTIONAL, {
                "title": "Refund Processed",
                "subtitle": "Your refund has been initiated",
                "message": "Your refund request has been processed successfully.",
                "transaction_type": "refund",
                **_money(data),
                "transaction_id": data.get("refundId"),
                "details": _list(data, "details"),
                "footer_note": data.get("deliveryNote"),
            })
        case NotificationType.PAYOUT_PROCESSED:
            return EmailSpec("Payout Processed", EmailTemplate.TRANSACTIONAL, {
                "title": "Payout Processed",
                "subtitle": "Your earnings have been transferred",
                "message": "Your earnings have been successfully transferred to your account.",
                "transaction_type": "success",
                **_money(data),
                "transaction_id": data.get("payoutId"),
                "details": _list(data, "details"),
            })
        case NotificationType.SUPPORT_TICKET_RESOLVED:
            resolution = data.get("resolution")
            return EmailSpec("Support Ticket Resolved", EmailTemplate.SYSTEM, {
                "title": "Support Ticket Resolved",
                "subtitle": "Your support request has been resolved",
                "message": "We have resolved your support ticket. Please review the solution.",
                "system_type": "support",
                "ticket_id": data.get("ticketId"),
                "action_button": "View Resolution",
                "action_url": data.get("ticketUrl"),
                "additional_info": [resolution] if resolution else [],
            })
        case _:
            return None


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["html_to_text"] = html_to_text
    return env


def html_to_text(html: str) -> str:
    """Plain-text alternative for an HTML body."""
    html = re.sub(r"<(style|title)[^>]*>.*?</\1>", "", html, flags=re.IGNORECASE | re.DOTALL)
    html = re.sub(
        r'<a[^>]+href=["\']([^"\']+)["\'][^>]*>([^<]+)</a>',
        r"\2 (\1)",
        html,
        flags=re.IGNORECASE,
    )
    html = re.sub(r"</?(p|div|h[1-6])[^>]*>", "\n\n", html, flags=re.IGNORECASE)
    html = re.sub(r"<br\s*/?>", "\n", html, flags=re.IGNORECASE)
    html = re.sub(r"<li[^>]*>", "\n  * ", html, flags=re.IGNORECASE)
    html = re.sub(r"<[^>]+>", "", html)
    text = unescape(html)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


def render_email(
    notification: DomainNotification,
    recipient: DomainRecipient,
    brand: Branding | None = None,
) -> EmailContent | None:
    spec = select_template(notification)
    if spec is None:
        return None

    brand = brand or Branding()
    context = {
        "user_name": recipient.display_name,
        "brand_name": brand.name,
        "app_url": brand.app_url,
        "year": datetime.now(UTC).year,
        "footer_note": None,
        "action_url": None,
        "action_button": None,
        **spec.context,
    }
    html = get_environment().get_template(f"{spec.template}.html").render(**context)
    return EmailContent(subject=f"{spec.subject} - {brand.name}", html=html, text=html_to_text(html))
