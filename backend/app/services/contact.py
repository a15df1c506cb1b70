"""Contact form submission and owner notification email."""
import html
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from sqlalchemy.orm import Session

from app.config import Settings
from app.models.contact import ContactMessage

logger = logging.getLogger(__name__)

THANK_YOU_MESSAGE = "Thank you for your message!"


@dataclass(frozen=True)
class ContactNotice:
    """Snapshot of a stored submission, safe to hand to a background task."""

    id: int
    name: str
    email: str
    subject: str
    message: str
    sent_at: datetime

    @classmethod
    def from_model(cls, contact: ContactMessage) -> "ContactNotice":
        return cls(
            id=contact.id,
            name=contact.name,
            email=contact.email,
            subject=contact.subject,
            message=contact.message,
            sent_at=contact.sent_at,
        )


def save_contact_message(db: Session, name: str, email: str, subject: str, message: str) -> ContactMessage:
    """Persist a contact form submission."""
    contact = ContactMessage(name=name, email=email, subject=subject, message=message)
    db.add(contact)
    db.flush()
    logger.info(f"Contact message saved with ID: {contact.id}")
    return contact


def sanitize_header_value(value: str | None) -> str:
    """Replace CR/LF so user input cannot inject extra mail headers."""
    if value is None:
        return ""
    return value.replace("\r", " ").replace("\n", " ").strip()


def build_contact_email_html(contact: ContactNotice) -> str:
    """Generate the HTML body for the owner notification."""
    sent_at = contact.sent_at.strftime("%d %b %Y, %H:%M")
    body = html.escape(contact.message).replace("\n", "<br>")
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif;">
        <h2>New Contact Form Submission</h2>
        <p><strong>Name:</strong> {html.escape(contact.name)}</p>
        <p><strong>Email:</strong> {html.escape(contact.email)}</p>
        <p><strong>Subject:</strong> {html.escape(contact.subject)}</p>
        <p><strong>Sent At:</strong> {sent_at}</p>
        <hr>
        <h3>Message:</h3>
        <p>{body}</p>
    </body>
    </html>
    """


def build_contact_email(contact: ContactNotice, settings: Settings) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = f"Contact Form: {sanitize_header_value(contact.subject)}"
    msg["From"] = formataddr((settings.contact_from_name, settings.contact_from_email))
    msg["To"] = settings.contact_recipient_email
    msg["Reply-To"] = sanitize_header_value(contact.email)

    plain_text = (
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n"
        f"Subject: {contact.subject}\n\n"
        f"{contact.message}\n"
    )
    msg.attach(MIMEText(plain_text, "plain"))
    msg.attach(MIMEText(build_contact_email_html(contact), "html"))
    return msg


def send_contact_notification(contact: ContactNotice, settings: Settings) -> bool:
    """Email the site owner about a submission using SMTP.

    Returns False when SMTP is not configured or sending fails; the
    submission itself is already stored either way.
    """
    if not settings.smtp_host or not settings.contact_recipient_email:
        logger.warning("SMTP not configured, skipping contact email")
        return False

    msg = build_contact_email(contact, settings)
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            if settings.smtp_user and settings.smtp_password:
                server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send contact email for message {contact.id}: {e}")
        return False

    logger.info(f"Contact message {contact.id} sent successfully")
    return True
