"""Notification service for booking emails.

Two email backends:
- console: renders the message and writes it to the log (development)
- sendgrid: delivers through the SendGrid v3 mail API
"""

import logging
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx

from app.config import settings
from app.schemas.booking import BookingResponse
from app.utils.formatting import format_event_datetime

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class ApprovalNotifier(Protocol):
    """Anything that can tell a requester their booking was approved."""

    async def send_approval(self, booking: BookingResponse) -> bool: ...


class NotificationService:
    """Service for sending booking notification emails."""

    def __init__(
        self,
        backend: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize notification service."""
        self.backend = backend or settings.email_backend
        self.api_key = api_key if api_key is not None else settings.sendgrid_api_key
        self.timeout = timeout or settings.notification_timeout_seconds
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    # ==================== BOOKING NOTIFICATIONS ====================

    async def send_approval(self, booking: BookingResponse) -> bool:
        """Tell the requester their booking was approved.

        Args:
            booking: The approved booking

        Returns:
            bool: True if the email was accepted for delivery
        """
        subject = "Your booking has been approved!"
        text = self._approval_text(booking)
        html = self._generate_email_html(subject, text.replace("\n", "<br>"))
        sent = await self.send_email(
            to_email=booking.contact.email,
            subject=subject,
            html_content=html,
            text_content=text,
        )
        if sent:
            logger.info(
                f"Approval email sent to {booking.contact.email}",
                extra={"booking_id": str(booking.id)},
            )
        return sent

    # ==================== EMAIL ====================

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email through the configured backend.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body

        Returns:
            bool: True if sent successfully
        """
        if self.backend == "console":
            logger.info(
                "\n===== MOCK EMAIL =====\n"
                f"To: {to_email}\n"
                f"Subject: {subject}\n\n"
                f"{text_content or html_content}\n"
                "===== END MOCK EMAIL ====="
            )
            return True

        if not self.api_key:
            logger.error("SendGrid backend selected but SENDGRID_API_KEY is not set")
            return False

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [
                {
                    "to": [{"email": to_email}],
                }
            ],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }
        if text_content:
            payload["content"].insert(0, {"type": "text/plain", "value": text_content})

        try:
            response = await self.http_client.post(SENDGRID_SEND_URL, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"SendGrid request failed: {e}")
            return False

        if response.status_code not in (200, 202):
            logger.error(f"SendGrid rejected email: {response.status_code} {response.text}")
            return False
        return True

    def _approval_text(self, booking: BookingResponse) -> str:
        event = booking.event
        lines = [
            f"Dear {booking.contact.name},",
            "",
            f'We\'re pleased to inform you that your booking for "{event.title}" '
            "has been approved. The event is scheduled for:",
            "",
            f"Start: {format_event_datetime(event.start)}",
            f"End: {format_event_datetime(event.end)}",
        ]
        if event.details:
            lines += ["", "Event Details:", event.details]
        lines += ["", "Thank you for choosing our stage!"]
        return "\n".join(lines)

    def _generate_email_html(self, title: str, body: str) -> str:
        """Generate simple HTML email content.

        Args:
            title: Email title
            body: Email body (already HTML-safe line breaks)

        Returns:
            str: HTML email content
        """
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="utf-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
        </head>
        <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                     max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
            <div style="background-color: #f9fafb; border-radius: 8px; padding: 24px;">
                <h1 style="color: #111827; font-size: 24px; margin-bottom: 16px;">{title}</h1>
                <p style="color: #4b5563; font-size: 16px; line-height: 1.6;">{body}</p>
            </div>
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px; text-align: center;">
                &copy; {datetime.now(UTC).year} {settings.email_from_name}. All rights reserved.
            </p>
        </body>
        </html>
        """


notification_service = NotificationService()
