"""
Email Service using Resend

Notification dispatcher for state-transition emails. ``dispatch_notification``
is the only entry point services call; it renders a named template and sends
it, and never raises. Callers get a ``SendResult`` and decide what to report.
"""

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from html import escape
from typing import Any

import resend

from alumni_portal.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key


class EmailTemplate(str, enum.Enum):
    """Templates the dispatcher knows how to render."""

    PROFILE_APPROVED = "profile-approved"
    PROFILE_REJECTED = "profile-rejected"
    EVENT_REGISTRATION = "event-registration"
    JOB_APPLICATION_RECEIVED = "job-application-received"


@dataclass(frozen=True)
class SendResult:
    """Outcome of a send attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> SendResult:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        SendResult with the provider message id, or the error text
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return SendResult(success=True, message_id="logged")

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return SendResult(success=True, message_id=email["id"])
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return SendResult(success=False, error=str(e))


_STYLE = """
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: {accent}; margin-bottom: 24px; }}
            .box {{ background-color: #f9fafb; border: 1px solid #e5e7eb; padding: 16px; border-radius: 8px; margin: 16px 0; }}
            .box p {{ margin: 0; }}
            .button {{ display: inline-block; background-color: #1a365d; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>"""


def _wrap(title: str, body: str, accent: str = "#1a365d") -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE.format(accent=accent)}
    </head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>Alumni Portal</p>
            </div>
        </div>
    </body>
    </html>
    """


def _comment_box(comment: str | None, label: str) -> str:
    if not comment:
        return ""
    return f"""
            <div class="box">
                <p><strong>{label}:</strong></p>
                <p>{escape(comment)}</p>
            </div>"""


def _render_profile_approved(data: dict[str, Any]) -> tuple[str, str]:
    name = escape(data.get("name") or "Alumnus")
    login_url = f"{settings.frontend_url}/login"
    body = f"""
            <p>Hello {name},</p>
            <p>Your alumni profile has been <strong>approved</strong>. You now have full access
            to the directory, job board, events and messaging.</p>
            {_comment_box(data.get('comment'), 'Administrator comment')}
            <a href="{login_url}" class="button">Sign in</a>"""
    return "Your alumni profile has been approved", _wrap("Profile Approved", body, "#047857")


def _render_profile_rejected(data: dict[str, Any]) -> tuple[str, str]:
    name = escape(data.get("name") or "Alumnus")
    body = f"""
            <p>Hello {name},</p>
            <p>After review, your alumni profile could not be approved at this time.</p>
            {_comment_box(data.get('comment'), 'Reason')}
            <p>You can update your profile and it will be reviewed again.</p>"""
    return "Update on your alumni profile", _wrap("Profile Not Approved", body, "#b91c1c")


def _render_event_registration(data: dict[str, Any]) -> tuple[str, str]:
    name = escape(data.get("name") or "Alumnus")
    title = escape(data.get("event_title") or "the event")
    details = [
        f"<p><strong>Date:</strong> {escape(str(data['event_date']))}</p>" if data.get("event_date") else "",
        f"<p><strong>Time:</strong> {escape(str(data['start_time']))}</p>" if data.get("start_time") else "",
        f"<p><strong>Location:</strong> {escape(data['location'])}</p>" if data.get("location") else "",
    ]
    if data.get("meeting_link"):
        details.append(f"<p><strong>Join:</strong> {escape(data['meeting_link'])}</p>")
    detail_html = "".join(details)
    body = f"""
            <p>Hello {name},</p>
            <p>You are registered for <strong>{title}</strong>.</p>
            <div class="box">{detail_html}</div>"""
    return f"Registration confirmed: {data.get('event_title') or 'event'}", _wrap(
        "Event Registration Confirmed", body
    )


def _render_job_application_received(data: dict[str, Any]) -> tuple[str, str]:
    name = escape(data.get("name") or "Alumnus")
    job_title = escape(data.get("job_title") or "the position")
    company = escape(data.get("company_name") or "")
    location = "Remote" if data.get("is_remote") else escape(data.get("location") or "")
    location = location or "Not specified"
    at_company = f" at {company}" if company else ""
    body = f"""
            <p>Hello {name},</p>
            <p>Your application for <strong>{job_title}</strong>{at_company}
            has been submitted. The poster will review it and you will see the decision
            on your applications page.</p>
            <div class="box"><p><strong>Location:</strong> {location}</p></div>"""
    return f"Application received: {data.get('job_title') or 'job'}", _wrap("Application Received", body)


_RENDERERS: dict[EmailTemplate, Callable[[dict[str, Any]], tuple[str, str]]] = {
    EmailTemplate.PROFILE_APPROVED: _render_profile_approved,
    EmailTemplate.PROFILE_REJECTED: _render_profile_rejected,
    EmailTemplate.EVENT_REGISTRATION: _render_event_registration,
    EmailTemplate.JOB_APPLICATION_RECEIVED: _render_job_application_received,
}


async def dispatch_notification(
    template: EmailTemplate | str,
    recipient: str | None,
    data: dict[str, Any],
) -> SendResult:
    """
    Render ``template`` with ``data`` and send it to ``recipient``.

    Never raises: unknown templates, missing recipients, render errors and
    transport failures all come back as ``SendResult(success=False)``.
    """
    try:
        template = EmailTemplate(template)
    except ValueError:
        logger.error(f"Unknown email template: {template}")
        return SendResult(success=False, error=f"Unknown template: {template}")

    if not recipient:
        logger.warning(f"No recipient address for {template.value} notification")
        return SendResult(success=False, error="Recipient has no email address")

    try:
        subject, html_content = _RENDERERS[template](data)
        return await send_email(recipient, subject, html_content)
    except Exception as e:
        logger.error(f"Failed to dispatch {template.value} to {recipient}: {e}", exc_info=True)
        return SendResult(success=False, error=str(e))


__all__ = ["EmailTemplate", "SendResult", "dispatch_notification", "send_email"]
