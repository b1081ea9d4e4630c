from app.services.email.client import (
    ConsoleEmailClient,
    EmailClient,
    EmailMessage,
    SMTPEmailClient,
    create_email_client,
)
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.templates import Branding, EmailContent, EmailTemplate, render_email, select_template

__all__ = [
    "Branding",
    "ConsoleEmailClient",
    "EmailClient",
    "EmailContent",
    "EmailDispatcher",
    "EmailMessage",
    "EmailTemplate",
    "SMTPEmailClient",
    "create_email_client",
    "render_email",
    "select_template",
]
