"""
Tests for the notification dispatcher.

``dispatch_notification`` must never raise: render failures, unknown
templates and transport failures all come back as a failed SendResult.
"""

from datetime import date, time
from unittest.mock import AsyncMock, patch

import pytest

from alumni_portal.core.email import (
    _RENDERERS,
    EmailTemplate,
    SendResult,
    dispatch_notification,
    send_email,
)


class TestRenderers:
    def test_every_template_has_a_renderer(self):
        assert set(_RENDERERS) == set(EmailTemplate)

    def test_profile_approved_escapes_user_input(self):
        subject, html = _RENDERERS[EmailTemplate.PROFILE_APPROVED](
            {"name": "<script>x</script>", "comment": "Welcome & congrats"}
        )
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html
        assert "Welcome &amp; congrats" in html
        assert subject

    def test_profile_rejected_includes_reason(self):
        _, html = _RENDERERS[EmailTemplate.PROFILE_REJECTED](
            {"name": "Ada", "comment": "Graduation year could not be verified"}
        )
        assert "Graduation year could not be verified" in html

    def test_event_registration_details(self):
        subject, html = _RENDERERS[EmailTemplate.EVENT_REGISTRATION](
            {
                "name": "Ada",
                "event_title": "Homecoming",
                "event_date": date(2026, 11, 5),
                "start_time": time(18, 30),
                "location": "Main Hall",
            }
        )
        assert "Homecoming" in subject
        assert "2026-11-05" in html
        assert "Main Hall" in html

    def test_job_application_received(self):
        subject, html = _RENDERERS[EmailTemplate.JOB_APPLICATION_RECEIVED](
            {"name": "Ada", "job_title": "Data Engineer", "company_name": "Acme", "is_remote": True}
        )
        assert "Data Engineer" in subject
        assert "Acme" in html


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_without_api_key_logs_and_succeeds(self):
        with patch("alumni_portal.core.email.resend.api_key", None):
            result = await send_email("ada@alumni.test", "Hi", "<p>Hi</p>")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_transport_error_reported(self):
        with (
            patch("alumni_portal.core.email.resend.api_key", "re_test"),
            patch(
                "alumni_portal.core.email.resend.Emails.send",
                side_effect=RuntimeError("connection reset"),
            ),
        ):
            result = await send_email("ada@alumni.test", "Hi", "<p>Hi</p>")
        assert result.success is False
        assert "connection reset" in result.error


class TestDispatchNotification:
    @pytest.mark.asyncio
    async def test_sends_rendered_template(self):
        with patch(
            "alumni_portal.core.email.send_email",
            new=AsyncMock(return_value=SendResult(success=True, message_id="m1")),
        ) as mock_send:
            result = await dispatch_notification(
                EmailTemplate.PROFILE_APPROVED, "ada@alumni.test", {"name": "Ada"}
            )
        assert result.success is True
        to_email, subject, _ = mock_send.call_args.args
        assert to_email == "ada@alumni.test"
        assert subject

    @pytest.mark.asyncio
    async def test_accepts_template_name(self):
        with patch(
            "alumni_portal.core.email.send_email",
            new=AsyncMock(return_value=SendResult(success=True)),
        ):
            result = await dispatch_notification("profile-rejected", "ada@alumni.test", {})
        assert result.success is True

    @pytest.mark.asyncio
    async def test_unknown_template(self):
        result = await dispatch_notification("password-reset", "ada@alumni.test", {})
        assert result.success is False

    @pytest.mark.asyncio
    async def test_missing_recipient(self):
        result = await dispatch_notification(EmailTemplate.PROFILE_APPROVED, None, {})
        assert result.success is False

    @pytest.mark.asyncio
    async def test_transport_exception_is_contained(self):
        with patch(
            "alumni_portal.core.email.send_email",
            new=AsyncMock(side_effect=ConnectionError("smtp down")),
        ):
            result = await dispatch_notification(
                EmailTemplate.PROFILE_APPROVED, "ada@alumni.test", {"name": "Ada"}
            )
        assert result.success is False
        assert "smtp down" in result.error
