"""
Email Service using Resend

Transactional emails: welcome, password reset, application submitted,
subscription activated and consultation booked.

Sends never raise: failures are logged and reported as False so that a mail
outage cannot fail the request that triggered it.
"""

import asyncio
import logging
from datetime import datetime
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

BRAND_NAME = "StudyPro Global"


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent (or logged, when no API key is configured)
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def _layout(title: str, body: str, button_text: str | None = None, button_url: str | None = None) -> str:
    """Wrap a template body in the shared HTML shell. `body` must already be escaped."""
    button = ""
    if button_text and button_url:
        button = f'<a href="{escape(button_url)}" class="button">{escape(button_text)}</a>'
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1e3a8a; margin-bottom: 24px; }}
            .button {{ display: inline-block; background-color: #1e3a8a; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }}
            .info-box {{ background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{escape(title)}</h1>
            {body}
            {button}
            <div class="footer">
                <p>{BRAND_NAME} - Your partner for studying abroad</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_welcome_email(to_email: str, full_name: str) -> bool:
    """Sent after registration."""
    body = f"""
            <p>Hello {escape(full_name)},</p>
            <p>Welcome to {BRAND_NAME}! Your account is ready.</p>
            <div class="info-box">
                <p>Start by completing your profile, then explore universities and scholarships
                that match your goals. Free accounts can submit up to 3 applications.</p>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Welcome to {BRAND_NAME}",
        html_content=_layout(
            "Welcome aboard!", body, "Go to your dashboard", f"{settings.frontend_url}/dashboard"
        ),
    )


async def send_password_reset_email(to_email: str, full_name: str, token: str) -> bool:
    """Password reset link; the token is only ever sent, never logged."""
    reset_url = f"{settings.frontend_url}/reset-password?token={token}"
    body = f"""
            <p>Hello {escape(full_name)},</p>
            <p>We received a request to reset your password. Click the button below to choose a new one.</p>
            <p><strong>This link expires in {settings.password_reset_expire_minutes} minutes.</strong></p>
            <p>If you didn't request a reset, you can safely ignore this email.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Reset your {BRAND_NAME} password",
        html_content=_layout("Password reset", body, "Reset password", reset_url),
    )


async def send_application_submitted_email(
    to_email: str,
    full_name: str,
    university_name: str,
    program_name: str,
) -> bool:
    body = f"""
            <p>Hello {escape(full_name)},</p>
            <p>Your application has been submitted.</p>
            <div class="info-box">
                <p><strong>University:</strong> {escape(university_name)}</p>
                <p><strong>Program:</strong> {escape(program_name)}</p>
            </div>
            <p>We'll let you know as soon as its status changes.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Application submitted: {university_name}",
        html_content=_layout(
            "Application submitted", body, "Track applications", f"{settings.frontend_url}/applications"
        ),
    )


async def send_subscription_activated_email(
    to_email: str,
    full_name: str,
    plan_name: str,
    expires_at: datetime,
) -> bool:
    body = f"""
            <p>Hello {escape(full_name)},</p>
            <p>Your <strong>{escape(plan_name)}</strong> subscription is now active.</p>
            <div class="info-box">
                <p><strong>Valid until:</strong> {expires_at.strftime("%d %B %Y")}</p>
            </div>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Your {plan_name} subscription is active",
        html_content=_layout(
            "Subscription activated", body, "Explore your benefits", f"{settings.frontend_url}/dashboard"
        ),
    )


async def send_consultation_booked_email(
    to_email: str,
    full_name: str,
    consultation_type: str,
    scheduled_at: datetime,
    duration_minutes: int,
) -> bool:
    body = f"""
            <p>Hello {escape(full_name)},</p>
            <p>Your consultation is booked.</p>
            <div class="info-box">
                <p><strong>Type:</strong> {escape(consultation_type.title())}</p>
                <p><strong>When:</strong> {scheduled_at.strftime("%d %B %Y, %H:%M UTC")}</p>
                <p><strong>Duration:</strong> {duration_minutes} minutes</p>
            </div>
            <p>You can reschedule or cancel from your dashboard.</p>
    """
    return await send_email(
        to_email=to_email,
        subject="Consultation booked",
        html_content=_layout(
            "Consultation confirmed", body, "View consultations", f"{settings.frontend_url}/consultations"
        ),
    )
