"""
Contact form email relay over SMTP.

Two messages per submission: a notification to the shop inbox and a
confirmation to the customer. All user-supplied text is HTML-escaped.
"""

import logging
import smtplib
from email.message import EmailMessage
from html import escape

from .config import settings

logger = logging.getLogger("powderpro.mailer")


def build_notification(form: dict) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.SMTP_FROM
    message["To"] = settings.NOTIFICATION_EMAIL
    message["Subject"] = f"New Contact Form Submission - {form['service']}"
    message.set_content(
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {escape(form['name'])}</p>"
        f"<p><strong>Email:</strong> {escape(form['email'])}</p>"
        f"<p><strong>Phone:</strong> {escape(form.get('phone') or 'Not provided')}</p>"
        f"<p><strong>Service:</strong> {escape(form['service'])}</p>"
        "<p><strong>Message:</strong></p>"
        f"<p>{escape(form['message'])}</p>",
        subtype="html",
    )
    return message


def build_confirmation(form: dict) -> EmailMessage:
    company = settings.COMPANY_NAME
    message = EmailMessage()
    message["From"] = settings.SMTP_FROM
    message["To"] = form["email"]
    message["Subject"] = f"Thank you for contacting {company}"
    message.set_content(
        f"<h2>Thank you for contacting {escape(company)}</h2>"
        f"<p>Dear {escape(form['name'])},</p>"
        f"<p>We have received your inquiry about our {escape(form['service'])} service. "
        "Our team will review your message and get back to you within 1-2 business days.</p>"
        "<p>Here's a summary of your message:</p>"
        f"<p>{escape(form['message'])}</p>"
        "<br>"
        "<p>Best regards,</p>"
        f"<p>The {escape(company)} Team</p>",
        subtype="html",
    )
    return message


class ContactMailer:
    """Sends contact form emails through the configured SMTP server."""

    def __init__(self, host: str = None, port: int = None, secure: bool = None,
                 user: str = None, password: str = None):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.secure = settings.SMTP_SECURE if secure is None else secure
        self.user = settings.SMTP_USER if user is None else user
        self.password = settings.SMTP_PASS if password is None else password

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=30)
        server = smtplib.SMTP(self.host, self.port, timeout=30)
        try:
            server.starttls()
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def send(self, messages: list) -> None:
        """Send messages over one connection. SMTP errors propagate."""
        with self._connect() as server:
            if self.user:
                server.login(self.user, self.password)
            for message in messages:
                server.send_message(message)
                logger.info(f"Email sent to: {message['To']}")

    def send_contact_form(self, form: dict) -> None:
        self.send([build_notification(form), build_confirmation(form)])


def get_mailer() -> ContactMailer:
    """FastAPI dependency: overridden in tests."""
    return ContactMailer()
