"""
Contact relay: validate a contact form submission, check it with reCAPTCHA v3
and forward it to the organizers' mailbox through Mailjet.

Nothing is stored; each submission is either relayed once or rejected.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests
from markupsafe import escape

logger = logging.getLogger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
RECAPTCHA_MIN_SCORE = 0.5
MAILJET_SEND_URL = "https://api.mailjet.com/v3.1/send"

DEFAULT_FROM_EMAIL = "noreply@devs0.ad"
DEFAULT_CONTACT_EMAIL = "info@conand.ad"
DEFAULT_TIMEOUT = 10

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactError(Exception):
    """A contact submission that could not be relayed. `message` is safe to show."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ContactValidationError(ContactError):
    status_code = 400


class ContactVerificationError(ContactError):
    status_code = 400

    def __init__(self, message: str = "reCAPTCHA verification failed"):
        super().__init__(message)


class ContactConfigurationError(ContactError):
    status_code = 500

    def __init__(self, message: str = "Email service not configured"):
        super().__init__(message)


class UpstreamServiceError(ContactError):
    status_code = 500

    def __init__(self, message: str = "Failed to send message"):
        super().__init__(message)


@dataclass(frozen=True)
class ContactSubmission:
    name: str
    email: str
    message: str
    subject: str = ""
    recaptcha_token: str = ""


def _field(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value).strip()


def validate_submission(payload: Any) -> ContactSubmission:
    """Check required fields then the email shape; first failure wins."""
    if not isinstance(payload, Mapping):
        payload = {}

    name = _field(payload, "name")
    email = _field(payload, "email")
    message = _field(payload, "message")

    if not name or not email or not message:
        raise ContactValidationError("Missing required fields")
    if not EMAIL_RE.match(email):
        raise ContactValidationError("Invalid email")

    return ContactSubmission(
        name=name,
        email=email,
        message=message,
        subject=_field(payload, "subject"),
        recaptcha_token=_field(payload, "recaptchaToken"),
    )


def verify_recaptcha(
    token: str, secret: str, session: requests.Session, timeout: float = DEFAULT_TIMEOUT
) -> None:
    """
    Ask Google to score a reCAPTCHA v3 token.

    Raises ContactVerificationError when the token is missing, rejected or
    scored below the threshold, and UpstreamServiceError when the verification
    service can't be reached or answers with something unreadable.
    """
    if not token:
        raise ContactVerificationError()

    try:
        response = session.post(RECAPTCHA_VERIFY_URL, data={"secret": secret, "response": token}, timeout=timeout)
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("reCAPTCHA verification request failed: %s", e, exc_info=True)
        raise UpstreamServiceError() from e

    if not isinstance(result, dict) or not result.get("success"):
        logger.info("reCAPTCHA rejected token: %s", result)
        raise ContactVerificationError()

    score = result.get("score")
    if not isinstance(score, (int, float)) or score < RECAPTCHA_MIN_SCORE:
        logger.info("reCAPTCHA score too low: %s", score)
        raise ContactVerificationError()


def build_mailjet_message(submission: ContactSubmission, from_email: str, contact_email: str) -> dict:
    """One Mailjet v3.1 message addressed to the organizers, replying to the submitter."""
    if submission.subject:
        subject = f"[CONAND Contact] {submission.subject}"
    else:
        subject = f"[CONAND Contact] Message from {submission.name}"

    text_part = (
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Subject: {submission.subject or 'N/A'}\n\n"
        f"Message:\n{submission.message}"
    )

    body = "<br />".join(str(escape(line)) for line in submission.message.split("\n"))
    html_part = (
        "<h3>New contact form message</h3>\n"
        f"<p><strong>Name:</strong> {escape(submission.name)}</p>\n"
        f"<p><strong>Email:</strong> {escape(submission.email)}</p>\n"
        f"<p><strong>Subject:</strong> {escape(submission.subject or 'N/A')}</p>\n"
        "<hr />\n"
        f"<p>{body}</p>\n"
    )

    return {
        "From": {"Email": from_email, "Name": "CONAND Web"},
        "To": [{"Email": contact_email, "Name": "CONAND"}],
        "ReplyTo": {"Email": submission.email, "Name": submission.name},
        "Subject": subject,
        "TextPart": text_part,
        "HTMLPart": html_part,
    }


def send_contact_email(
    message: dict,
    api_key: str,
    api_secret: str,
    session: requests.Session,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """POST a single message to Mailjet's send API. Raises UpstreamServiceError on any failure."""
    try:
        response = session.post(
            MAILJET_SEND_URL,
            json={"Messages": [message]},
            auth=(api_key, api_secret),
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Mailjet send failed: %s", e, exc_info=True)
        raise UpstreamServiceError() from e


def relay_contact_message(payload: Any, config: Mapping[str, Any], session: requests.Session) -> None:
    """Validate, verify and send one contact form submission."""
    submission = validate_submission(payload)
    timeout = config.get("OUTBOUND_TIMEOUT") or DEFAULT_TIMEOUT

    recaptcha_secret = config.get("RECAPTCHA_SECRET_KEY")
    if recaptcha_secret:
        verify_recaptcha(submission.recaptcha_token, recaptcha_secret, session, timeout)

    api_key = config.get("MAILJET_API_KEY")
    api_secret = config.get("MAILJET_API_SECRET")
    if not api_key or not api_secret:
        logger.error("Mailjet API keys not configured")
        raise ContactConfigurationError()

    message = build_mailjet_message(
        submission,
        from_email=config.get("MAILJET_FROM_EMAIL") or DEFAULT_FROM_EMAIL,
        contact_email=config.get("CONTACT_EMAIL") or DEFAULT_CONTACT_EMAIL,
    )
    send_contact_email(message, api_key, api_secret, session, timeout)
    logger.info("Relayed contact message from %s", submission.email)
