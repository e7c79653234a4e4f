"""
Outbound email with provider fallback.

Providers are tried in order (Brevo REST, SendGrid REST, SMTP); the first one
that accepts the message wins. Only configured providers take part.
"""
import logging
import html as html_lib
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Dict, List, Optional

import requests

from chamber.core.config import Settings

logger = logging.getLogger(__name__)

BREVO_URL = "https://api.brevo.com/v3/smtp/email"
SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailDeliveryError(Exception):
    pass


@dataclass
class EmailResult:
    success: bool
    method: str = "none"


class EmailProvider:
    name = "base"

    def send(self, to: str, subject: str, html: str) -> None:
        raise NotImplementedError


class BrevoProvider(EmailProvider):
    name = "Brevo REST API"

    def __init__(self, api_key: str, sender_email: str, sender_name: str, timeout: int = 10):
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        resp = requests.post(
            BREVO_URL,
            json={
                "sender": {"name": self.sender_name, "email": self.sender_email},
                "to": [{"email": to}],
                "subject": subject,
                "htmlContent": html,
            },
            headers={"api-key": self.api_key, "Content-Type": "application/json"},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise EmailDeliveryError(f"Brevo API error: {resp.status_code} - {resp.text[:200]}")


class SendGridProvider(EmailProvider):
    name = "SendGrid"

    def __init__(self, api_key: str, sender_email: str, sender_name: str, timeout: int = 10):
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        resp = requests.post(
            SENDGRID_URL,
            json={
                "personalizations": [{"to": [{"email": to}]}],
                "from": {"email": self.sender_email, "name": self.sender_name},
                "subject": subject,
                "content": [{"type": "text/html", "value": html}],
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise EmailDeliveryError(f"SendGrid API error: {resp.status_code} - {resp.text[:200]}")


class SmtpProvider(EmailProvider):
    name = "SMTP"

    def __init__(self, host: str, port: int, user: Optional[str], password: Optional[str],
                 sender_email: str, sender_name: str, timeout: int = 10):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        msg = EmailMessage()
        msg["From"] = f"{self.sender_name} <{self.sender_email}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Please view this message in an HTML-capable email client.")
        msg.add_alternative(html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)


def reset_email_html(reset_url: str, user_name: str, org_name: str) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #1e40af;">Password Reset Request</h1>
  <p>Hello {html_lib.escape(user_name)},</p>
  <p>We received a request to reset your password for your {org_name} account.
     Click the link below to choose a new password:</p>
  <p><a href="{reset_url}">Reset My Password</a></p>
  <p><strong>Important:</strong> This link will expire in 1 hour.</p>
  <p>If you didn't request this password reset, you can ignore this email.</p>
  <p style="color: #64748b; font-size: 14px;">If the link doesn't work, copy this address into your browser:<br>{reset_url}</p>
</div>
"""


class EmailService:
    def __init__(self, providers: List[EmailProvider], org_name: str = "Chamber of Commerce"):
        self.providers = providers
        self.org_name = org_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        providers: List[EmailProvider] = []
        if settings.BREVO_API_KEY:
            providers.append(BrevoProvider(settings.BREVO_API_KEY, settings.EMAIL_FROM,
                                           settings.EMAIL_FROM_NAME, settings.EMAIL_TIMEOUT))
        if settings.SENDGRID_API_KEY:
            providers.append(SendGridProvider(settings.SENDGRID_API_KEY, settings.EMAIL_FROM,
                                              settings.EMAIL_FROM_NAME, settings.EMAIL_TIMEOUT))
        if settings.SMTP_HOST:
            providers.append(SmtpProvider(settings.SMTP_HOST, settings.SMTP_PORT, settings.SMTP_USER,
                                          settings.SMTP_PASSWORD, settings.EMAIL_FROM,
                                          settings.EMAIL_FROM_NAME, settings.EMAIL_TIMEOUT))
        return cls(providers, org_name=settings.EMAIL_FROM_NAME)

    def send(self, to: str, subject: str, html: str) -> EmailResult:
        for provider in self.providers:
            try:
                provider.send(to, subject, html)
                logger.info(f"Email '{subject}' sent via {provider.name}")
                return EmailResult(success=True, method=provider.name)
            except (requests.RequestException, smtplib.SMTPException, OSError, EmailDeliveryError) as e:
                logger.error(f"{provider.name} failed: {e}")
        if self.providers:
            logger.error("All email services failed")
        else:
            logger.warning("No email service configured")
        return EmailResult(success=False)

    def send_reset_email(self, to: str, reset_url: str, user_name: str) -> EmailResult:
        subject = f"Password Reset Link - {self.org_name}"
        return self.send(to, subject, reset_email_html(reset_url, user_name, self.org_name))

    def status(self) -> Dict[str, bool]:
        enabled = {type(p) for p in self.providers}
        return {
            "brevo": BrevoProvider in enabled,
            "sendGrid": SendGridProvider in enabled,
            "smtp": SmtpProvider in enabled,
        }
