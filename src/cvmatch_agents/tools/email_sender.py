"""Email delivery via SendGrid or SMTP, plus candidate invitation templates."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from html import escape

import structlog

from cvmatch_core.exceptions import EmailDeliveryError

logger = structlog.get_logger()

INVITATION_SUBJECT = "Vous êtes invité(e) sur CVMatch"


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email ready to send."""

    to_email: str
    subject: str
    html_body: str
    text_body: str


def build_invitation_email(
    to_email: str,
    name: str,
    url: str,
    dossier_title: str | None = None,
    expires_in_days: int = 7,
) -> EmailMessage:
    """Render the candidate invitation email in French."""
    intro = "Vous avez été invité(e) à rejoindre CVMatch"
    if dossier_title:
        intro += f" dans le cadre du dossier « {dossier_title} »"
    intro += "."

    text_body = (
        f"Bonjour {name},\n\n"
        f"{intro}\n\n"
        f"Pour compléter votre profil, ouvrez le lien suivant :\n{url}\n\n"
        f"Ce lien expire dans {expires_in_days} jours.\n"
    )
    html_body = (
        f"<p>Bonjour {escape(name)},</p>"
        f"<p>{escape(intro)}</p>"
        f'<p><a href="{escape(url, quote=True)}">Compléter mon profil</a></p>'
        f"<p>Ce lien expire dans {expires_in_days} jours.</p>"
    )
    return EmailMessage(
        to_email=to_email,
        subject=INVITATION_SUBJECT,
        html_body=html_body,
        text_body=text_body,
    )


class EmailSender:
    """Send emails via SMTP or SendGrid."""

    def __init__(
        self,
        provider: str = "smtp",
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        sendgrid_api_key: str = "",
        from_email: str = "noreply@cvmatch.fr",
    ) -> None:
        """Initialize with email provider configuration."""
        self._provider = provider
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._sendgrid_api_key = sendgrid_api_key
        self._from_email = from_email

    async def send(self, message: EmailMessage) -> bool:
        """Send a rendered message through the configured provider."""
        try:
            if self._provider == "sendgrid":
                return await self._send_sendgrid(message)
            return await self._send_smtp(message)
        except EmailDeliveryError:
            raise
        except Exception as e:
            logger.error("email_send_failed", to=message.to_email, error=str(e))
            raise EmailDeliveryError(str(e)) from e

    async def send_invitation(
        self,
        to_email: str,
        name: str,
        url: str,
        dossier_title: str | None = None,
        expires_in_days: int = 7,
    ) -> bool:
        """Render and send a candidate invitation."""
        return await self.send(
            build_invitation_email(to_email, name, url, dossier_title, expires_in_days)
        )

    async def _send_smtp(self, message: EmailMessage) -> bool:
        """Send via SMTP using aiosmtplib."""
        import aiosmtplib

        msg = self._build_smtp_message(message)
        await aiosmtplib.send(
            msg,
            hostname=self._smtp_host,
            port=self._smtp_port,
            username=self._smtp_user or None,
            password=self._smtp_password or None,
            start_tls=True,
        )
        logger.info("email_sent_smtp", to=message.to_email)
        return True

    def _build_smtp_message(self, message: EmailMessage) -> MIMEMultipart:
        """Build a multipart/alternative MIME message."""
        from email.mime.text import MIMEText

        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self._from_email
        msg["To"] = message.to_email
        msg.attach(MIMEText(message.text_body, "plain", "utf-8"))
        msg.attach(MIMEText(message.html_body, "html", "utf-8"))
        return msg

    async def _send_sendgrid(self, message: EmailMessage) -> bool:
        """Send via SendGrid API."""

        def _send() -> bool:
            from sendgrid import SendGridAPIClient
            from sendgrid.helpers.mail import Content, Email, Mail, To

            mail = Mail(
                from_email=Email(self._from_email),
                to_emails=To(message.to_email),
                subject=message.subject,
            )
            mail.content = [
                Content("text/plain", message.text_body),
                Content("text/html", message.html_body),
            ]
            sg = SendGridAPIClient(self._sendgrid_api_key)
            response = sg.send(mail)
            return response.status_code in (200, 201, 202)

        result = await asyncio.to_thread(_send)
        logger.info("email_sent_sendgrid", to=message.to_email, accepted=result)
        return result
