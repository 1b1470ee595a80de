"""
Unit tests for the Resend email client.
"""

from unittest.mock import patch

import pytest

from citd_registration.core.email import (
    EmailAttachment,
    EmailClient,
    attachment_from_file,
)

RESEND_SEND = "citd_registration.core.email.resend.Emails.send"


class TestEmailAttachment:
    """Tests for EmailAttachment."""

    def test_to_resend(self):
        attachment = EmailAttachment(filename="a.pdf", content=b"\x00\x01")
        assert attachment.to_resend() == {
            "filename": "a.pdf",
            "content": [0, 1],
            "content_type": "application/pdf",
        }

    @pytest.mark.asyncio
    async def test_attachment_from_file(self, tmp_path):
        path = tmp_path / "report-1.xlsx"
        path.write_bytes(b"PK")

        attachment = await attachment_from_file(path, filename="Report.xlsx")

        assert attachment.filename == "Report.xlsx"
        assert attachment.content == b"PK"

    @pytest.mark.asyncio
    async def test_attachment_from_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            await attachment_from_file(tmp_path / "missing.pdf")


class TestEmailClient:
    """Tests for EmailClient.send."""

    @pytest.mark.asyncio
    async def test_without_api_key_logs_instead_of_sending(self):
        client = EmailClient(api_key=None, default_sender="CITD <noreply@citd.in>")

        with patch(RESEND_SEND) as mock_send:
            assert await client.send("a@b.com", "Subject", "<p>Hi</p>") is True
            mock_send.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_builds_resend_params(self):
        client = EmailClient(api_key="re_test", default_sender="CITD <noreply@citd.in>")
        attachment = EmailAttachment(filename="a.pdf", content=b"%PDF")

        with patch(RESEND_SEND, return_value={"id": "email_1"}) as mock_send:
            sent = await client.send(
                "student@gmail.com", "Subject", "<p>Hi</p>", attachments=[attachment]
            )

        assert sent is True
        params = mock_send.call_args.args[0]
        assert params["from"] == "CITD <noreply@citd.in>"
        assert params["to"] == ["student@gmail.com"]
        assert params["attachments"][0]["filename"] == "a.pdf"

    @pytest.mark.asyncio
    async def test_sender_override(self):
        client = EmailClient(api_key="re_test", default_sender="CITD <noreply@citd.in>")

        with patch(RESEND_SEND, return_value={"id": "email_2"}) as mock_send:
            await client.send("f@citd.in", "Batch", "<p/>", sender="Batch <batch@citd.in>")

        assert mock_send.call_args.args[0]["from"] == "Batch <batch@citd.in>"
        assert "attachments" not in mock_send.call_args.args[0]

    @pytest.mark.asyncio
    async def test_send_failure_returns_false(self):
        client = EmailClient(api_key="re_test", default_sender="CITD <noreply@citd.in>")

        with patch(RESEND_SEND, side_effect=Exception("invalid api key")):
            assert await client.send("a@b.com", "Subject", "<p>Hi</p>") is False
