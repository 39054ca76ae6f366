"""Send one-time verification codes through the Resend transactional email API.

Legacy path: the nickname-only registration flow never calls it.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verification code"


class EmailNotConfiguredError(Exception):
    """Raised when RESEND_API_KEY is not set."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmailProviderError(Exception):
    """Raised when the provider rejects the message or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


def build_verification_html(code: str) -> str:
    return f"<h1>Your code: {html.escape(code)}</h1>"


async def send_verification_email(to: str, code: str, settings: Settings) -> str | None:
    """
    Send ``code`` to ``to``. Returns the provider message id when present.

    Raises EmailNotConfiguredError without an API key and EmailProviderError when the
    provider answers with an error or times out.
    """
    if settings.RESEND_API_KEY is None or not settings.RESEND_API_KEY.get_secret_value().strip():
        raise EmailNotConfiguredError("Email is not configured; set RESEND_API_KEY.")

    payload = {
        "from": settings.VERIFICATION_EMAIL_FROM,
        "to": [to],
        "subject": VERIFICATION_SUBJECT,
        "html": build_verification_html(code),
    }
    headers = {"Authorization": f"Bearer {settings.RESEND_API_KEY.get_secret_value()}"}
    url = f"{settings.RESEND_API_URL}/emails"

    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(settings.EMAIL_REQUEST_TIMEOUT_SEC)) as client:
            resp = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as e:
        raise EmailProviderError("Email provider request timed out.") from e
    except httpx.HTTPError as e:
        raise EmailProviderError("Email provider is unreachable.") from e

    try:
        body = resp.json()
    except ValueError:
        body = {"message": resp.text[:300] if resp.text else "Unknown error"}

    if resp.status_code >= 400:
        logger.error(
            "Verification email rejected",
            extra={"status_code": resp.status_code},
        )
        raise EmailProviderError(
            f"Email provider returned {resp.status_code}.",
            status_code=resp.status_code,
            detail=body,
        )

    message_id = body.get("id") if isinstance(body, dict) else None
    logger.info("Verification email sent", extra={"message_id": message_id})
    return message_id
