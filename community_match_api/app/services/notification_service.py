"""
Transactional email notifications.

Emails are delivered through a Resend‑compatible HTTP API: a JSON
``POST`` to ``settings.mail_api_url`` authenticated with the
``RESEND_API_KEY`` bearer token.  Delivery is always best effort.
Welcome and new‑message notifications run as FastAPI background tasks
after the response has been sent; their failures are only logged.
The password reset flow sends synchronously and inspects the result,
because the code has to reach the caller one way or another.
"""

import html
import logging
from typing import Tuple

import requests

from community_match_api.app.core.config import settings
from community_match_api.app.core.db import get_connection

logger = logging.getLogger(__name__)

_WRAPPER = '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">{body}</div>'
_SAFETY_NOTE = (
    '<p style="color: #856404; background: #fff3cd; padding: 15px; border-radius: 5px;">'
    "<strong>Stay safe:</strong><br>"
    "&bull; Always meet in public places<br>"
    "&bull; Tell someone close to you about the meeting<br>"
    "&bull; Trust your instincts"
    "</p>"
)


class DeliveryError(Exception):
    """The email could not be handed over to the email API."""


def welcome_email(name: str, city: str, offered_count: int, needed_count: int) -> Tuple[str, str]:
    body = (
        f'<h1 style="color: #f5576c;">Welcome, {html.escape(name)}!</h1>'
        "<p>We are glad you joined the community.</p>"
        "<p><strong>Your profile:</strong></p>"
        f"<ul><li>City: {html.escape(city)}</li>"
        f"<li>You offer: {offered_count} services</li>"
        f"<li>You are looking for: {needed_count} services</li></ul>"
        "<p><strong>What next?</strong></p>"
        "<ol><li>Log in to the app</li><li>Search for people in your city</li>"
        "<li>Get in touch and agree on the details</li></ol>"
        f"{_SAFETY_NOTE}"
        "<p>Good luck!</p>"
    )
    return "Welcome to the community!", _WRAPPER.format(body=body)


def new_message_email(recipient_name: str, sender_name: str, sender_email: str, message: str) -> Tuple[str, str]:
    body = (
        '<h1 style="color: #f5576c;">New message!</h1>'
        f"<p>Hi {html.escape(recipient_name)},</p>"
        f"<p><strong>{html.escape(sender_name)}</strong> sent you a message:</p>"
        '<div style="background: #f8f9fa; padding: 20px; border-radius: 5px; margin: 20px 0;">'
        f"&quot;{html.escape(message)}&quot;</div>"
        "<p><strong>Reply:</strong></p>"
        f"<ul><li>Email: {html.escape(sender_email)}</li>"
        "<li>Or log in to the app and answer there</li></ul>"
        f"{_SAFETY_NOTE}"
    )
    return f"{sender_name} sent you a message!", _WRAPPER.format(body=body)


def reset_code_email(name: str, code: str, ttl_minutes: int) -> Tuple[str, str]:
    body = (
        '<h1 style="color: #f5576c;">Password reset</h1>'
        f"<p>Hi {html.escape(name)},</p>"
        "<p>You asked to reset your password. Your reset code is:</p>"
        '<div style="background: #f8f9fa; padding: 20px; text-align: center; font-size: 32px; '
        f'font-weight: bold; letter-spacing: 5px; margin: 20px 0;">{code}</div>'
        f"<p>The code is valid for <strong>{ttl_minutes} minutes</strong>.</p>"
        "<p>If you did not ask for a reset, ignore this email.</p>"
    )
    return "Password reset", _WRAPPER.format(body=body)


class NotificationService:
    """Outbound email gateway."""

    @classmethod
    def send_email(cls, to: str, subject: str, html_body: str) -> None:
        """Hand one email to the email API.

        Raises ``DeliveryError`` when no API key is configured, the
        request fails, or the API answers with an error status.
        """
        if not settings.resend_api_key:
            raise DeliveryError("Email delivery is not configured")
        try:
            response = requests.post(
                settings.mail_api_url,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
                json={"from": settings.mail_from, "to": [to], "subject": subject, "html": html_body},
                timeout=settings.mail_timeout,
            )
        except requests.RequestException as exc:
            raise DeliveryError(str(exc)) from exc
        if response.status_code >= 400:
            raise DeliveryError(f"Email API answered {response.status_code}: {response.text[:200]}")
        logger.info("Sent %r to %s", subject, to)

    @classmethod
    def deliver(cls, to: str, subject: str, html_body: str) -> bool:
        """Send an email, logging instead of raising on failure."""
        try:
            cls.send_email(to, subject, html_body)
        except DeliveryError as exc:
            logger.warning("Failed to send %r to %s: %s", subject, to, exc)
            return False
        return True

    @classmethod
    def send_welcome(cls, to: str, name: str, city: str, offered_count: int, needed_count: int) -> bool:
        subject, body = welcome_email(name, city, offered_count, needed_count)
        return cls.deliver(to, subject, body)

    @classmethod
    def send_reset_code(cls, to: str, name: str, code: str) -> bool:
        subject, body = reset_code_email(name, code, settings.reset_code_ttl_minutes)
        return cls.deliver(to, subject, body)

    @classmethod
    def notify_new_message(cls, message_id: int) -> bool:
        """Tell the recipient of ``message_id`` about it.

        Runs after the request's own connection is closed, so it opens
        its own.  A message deleted in the meantime is skipped.
        """
        conn = get_connection()
        try:
            row = conn.execute(
                """
                SELECT m.message,
                       u_from.name AS from_name, u_from.email AS from_email,
                       u_to.name AS to_name, u_to.email AS to_email
                FROM messages m
                JOIN users u_from ON m.from_user_id = u_from.id
                JOIN users u_to ON m.to_user_id = u_to.id
                WHERE m.id = ?
                """,
                (message_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            logger.info("Message %s no longer exists; notification skipped", message_id)
            return False
        subject, body = new_message_email(row["to_name"], row["from_name"], row["from_email"], row["message"])
        return cls.deliver(row["to_email"], subject, body)
