"""Tests for invitation email rendering and delivery."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from cvmatch_agents.tools.email_sender import (
    INVITATION_SUBJECT,
    EmailMessage,
    EmailSender,
    build_invitation_email,
)
from cvmatch_agents.tools.factories import create_email_sender
from cvmatch_core.exceptions import EmailDeliveryError
from tests.mocks.mock_settings import make_settings


def _message() -> EmailMessage:
    return build_invitation_email("lea@example.fr", "Léa", "https://app.test/invitation?token=t")


@pytest.mark.unit
class TestBuildInvitationEmail:
    """Test the French invitation template."""

    def test_renders_name_url_and_expiry(self) -> None:
        """Both bodies greet the candidate and carry the link."""
        message = build_invitation_email(
            "lea@example.fr", "Léa", "https://app.test/invitation?token=t", expires_in_days=3
        )

        assert message.subject == INVITATION_SUBJECT
        assert message.text_body.startswith("Bonjour Léa,")
        assert "https://app.test/invitation?token=t" in message.text_body
        assert "expire dans 3 jours" in message.text_body
        assert 'href="https://app.test/invitation?token=t"' in message.html_body

    def test_mentions_dossier(self) -> None:
        """The dossier title appears when given."""
        message = build_invitation_email("a@b.fr", "A", "https://x", dossier_title="Data BNP")
        assert "« Data BNP »" in message.text_body

    def test_html_is_escaped(self) -> None:
        """Names are HTML-escaped in the HTML body only."""
        message = build_invitation_email("a@b.fr", "<b>Jo</b>", "https://x")
        assert "&lt;b&gt;Jo&lt;/b&gt;" in message.html_body
        assert "<b>Jo</b>" in message.text_body


@pytest.mark.unit
class TestEmailSender:
    """Test provider routing and error wrapping."""

    @pytest.mark.asyncio
    async def test_routes_to_smtp(self) -> None:
        """The smtp provider uses _send_smtp."""
        sender = EmailSender(provider="smtp")
        with patch.object(sender, "_send_smtp", new_callable=AsyncMock, return_value=True) as smtp:
            assert await sender.send(_message()) is True
        smtp.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_routes_to_sendgrid(self) -> None:
        """The sendgrid provider uses _send_sendgrid."""
        sender = EmailSender(provider="sendgrid", sendgrid_api_key="sg")
        with patch.object(sender, "_send_sendgrid", new_callable=AsyncMock, return_value=True) as sg:
            assert await sender.send(_message()) is True
        sg.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wraps_transport_errors(self) -> None:
        """Unexpected failures become EmailDeliveryError."""
        sender = EmailSender()
        with (
            patch.object(
                sender, "_send_smtp", new_callable=AsyncMock, side_effect=ConnectionError("refused")
            ),
            pytest.raises(EmailDeliveryError, match="refused"),
        ):
            await sender.send(_message())

    @pytest.mark.asyncio
    async def test_smtp_uses_aiosmtplib(self) -> None:
        """SMTP delivery passes host, port and credentials to aiosmtplib."""
        sender = EmailSender(smtp_host="smtp.test", smtp_port=2525, smtp_user="u", smtp_password="p")
        with patch("aiosmtplib.send", new_callable=AsyncMock) as send:
            await sender.send_invitation("lea@example.fr", "Léa", "https://x")

        kwargs = send.call_args.kwargs
        assert kwargs["hostname"] == "smtp.test"
        assert kwargs["port"] == 2525
        assert kwargs["username"] == "u"
        mime = send.call_args.args[0]
        assert mime["To"] == "lea@example.fr"
        assert mime.get_content_subtype() == "alternative"

    def test_factory_reads_settings(self) -> None:
        """create_email_sender copies provider and sender address."""
        sender = create_email_sender(make_settings(email_provider="sendgrid"))
        assert sender._provider == "sendgrid"
        assert sender._from_email == "noreply@cvmatch.test"
        assert sender._sendgrid_api_key == ""
