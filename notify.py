"""
Outbound notifications to customers: email over SMTP, SMS and WhatsApp over
Twilio. Missing credentials raise NotifyError with status 400; provider
failures raise NotifyError with status 500.
"""
import smtplib
from email.message import EmailMessage

from twilio.base.exceptions import TwilioException
from twilio.rest import Client as TwilioClient

from config import Settings
from errors import NotifyError
from logger import get_logger

_logger = get_logger(__name__)

REPLY_SUBJECT = "Reply from SBO Oil Seals"


def send_email(settings: Settings, to: str, subject: str, text: str) -> None:
    host, port = settings.smtp_host, settings.smtp_port
    user, password = settings.smtp_user, settings.smtp_pass
    sender = settings.smtp_from or user
    if not (host and port and user and password and sender):
        raise NotifyError(
            "SMTP not configured (set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM)",
            status_code=400,
        )

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)

    try:
        if port == 465:
            with smtplib.SMTP_SSL(host, port) as smtp:
                smtp.login(user, password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(host, port) as smtp:
                smtp.starttls()
                smtp.login(user, password)
                smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        _logger.error(f"Email to {to} failed: {e}")
        raise NotifyError("Failed to send email") from e
    _logger.info(f"Email sent to {to}")


def _twilio(settings: Settings, sender, channel: str, setting_name: str):
    if not (settings.twilio_account_sid and settings.twilio_auth_token and sender):
        raise NotifyError(
            f"Twilio {channel} not configured (set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, {setting_name})",
            status_code=400,
        )
    return TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)


def _send_message(client, sender: str, to: str, body: str, channel: str) -> None:
    try:
        client.messages.create(from_=sender, to=to, body=body)
    except (TwilioException, OSError) as e:
        _logger.error(f"{channel} to {to} failed: {e}")
        raise NotifyError(f"Failed to send {channel}") from e
    _logger.info(f"{channel} sent to {to}")


def send_sms(settings: Settings, to: str, body: str) -> None:
    sender = settings.twilio_from_number
    client = _twilio(settings, sender, "SMS", "TWILIO_FROM_NUMBER")
    _send_message(client, sender, to, body, "SMS")


def send_whatsapp(settings: Settings, to: str, body: str) -> None:
    # e.g. TWILIO_WHATSAPP_FROM=whatsapp:+14155238886
    sender = settings.twilio_whatsapp_from
    client = _twilio(settings, sender, "WhatsApp", "TWILIO_WHATSAPP_FROM")
    if not to.startswith("whatsapp:"):
        to = f"whatsapp:{to}"
    _send_message(client, sender, to, body, "WhatsApp")
