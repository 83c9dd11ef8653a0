"""
Contact form handling: reCAPTCHA check, submission rate limiting, owner
notification, sender confirmation, and persistence of the raw submission.
"""

import html
import logging
from datetime import timedelta

import httpx
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..db import CONTACT_SUBMISSIONS
from ..schemas import ActionResult, ContactForm
from ..utils import utcnow
from .ses_email import send_email_ses

logger = logging.getLogger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
RECAPTCHA_MIN_SCORE = 0.5

RATE_LIMIT_WINDOW = timedelta(hours=1)
MAX_PER_EMAIL = 3
MAX_PER_IP = 5

SUBMISSION_SOURCE = "portfolio_contact_form"


async def verify_recaptcha(token: str) -> bool:
    if not settings.RECAPTCHA_SECRET_KEY:
        logger.warning("reCAPTCHA secret key not configured")
        return True

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.post(
                RECAPTCHA_VERIFY_URL,
                data={"secret": settings.RECAPTCHA_SECRET_KEY, "response": token},
            )
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("reCAPTCHA verification failed: %s", e)
        return False
    return bool(data.get("success")) and data.get("score", 0) > RECAPTCHA_MIN_SCORE


def notification_email(form: ContactForm, received_at: str) -> tuple[str, str]:
    """Return (html, text) bodies for the message sent to the site owner."""
    e = {k: html.escape(v) if isinstance(v, str) else v for k, v in form.model_dump().items()}
    optional = [
        ("Company", e["company"]),
        ("Project Type", e["projectType"]),
        ("Budget", e["budget"]),
        ("Timeline", e["timeline"]),
    ]
    extra_html = "".join(f"<p><strong>{label}:</strong> {value}</p>" for label, value in optional if value)
    extra_text = "\n".join(f"{label}: {value}" for label, value in optional if value)

    html_body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb; border-bottom: 2px solid #e5e7eb; padding-bottom: 10px;">
    New Contact Form Submission
  </h2>
  <div style="background-color: #f9fafb; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Name:</strong> {e["name"]}</p>
    <p><strong>Email:</strong> {e["email"]}</p>
    <p><strong>Subject:</strong> {e["subject"]}</p>
    {extra_html}
  </div>
  <div style="background-color: #f9fafb; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0; color: #374151;">Message</h3>
    <p style="white-space: pre-wrap; line-height: 1.6;">{e["message"]}</p>
  </div>
  <p style="color: #6b7280; font-size: 14px;">Sent from your portfolio contact form at {received_at}</p>
</div>
"""
    text_body = (
        "New Contact Form Submission\n\n"
        f"Name: {form.name}\nEmail: {form.email}\nSubject: {form.subject}\n"
        f"{extra_text}\n\nMessage:\n{form.message}\n\n---\n"
        f"Sent from your portfolio contact form at {received_at}\n"
    )
    return html_body, text_body


def confirmation_email(form: ContactForm) -> str:
    name = html.escape(form.name)
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">Thanks for reaching out, {name}!</h2>
  <p>I've received your message and will get back to you within 24 hours.</p>
  <div style="background-color: #f9fafb; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p><strong>Subject:</strong> {html.escape(form.subject)}</p>
    <p style="white-space: pre-wrap; line-height: 1.6;">{html.escape(form.message)}</p>
  </div>
  <p>Best regards,<br>{html.escape(settings.SITE_AUTHOR_NAME)}</p>
  <p style="color: #6b7280; font-size: 14px;">This is an automated confirmation. Please don't reply to this email.</p>
</div>
"""


class ContactService:
    def __init__(self, db):
        self.collection = db[CONTACT_SUBMISSIONS]

    async def check_rate_limit(self, email: str, ip_address: str | None = None) -> bool:
        """True when the sender may submit again. Fails open on store errors."""
        since = utcnow() - RATE_LIMIT_WINDOW
        try:
            by_email = await self.collection.count_documents(
                {"email": email, "createdAt": {"$gte": since}}
            )
            if by_email >= MAX_PER_EMAIL:
                return False
            if ip_address:
                by_ip = await self.collection.count_documents(
                    {"ipAddress": ip_address, "createdAt": {"$gte": since}}
                )
                if by_ip >= MAX_PER_IP:
                    return False
        except PyMongoError:
            logger.exception("Rate limit check failed")
        return True

    async def save_submission(self, form: ContactForm, metadata: dict) -> None:
        doc = form.model_dump(exclude={"recaptchaToken"})
        doc.update({k: v for k, v in metadata.items() if v is not None})
        doc.update(createdAt=utcnow(), status="unread")
        try:
            await self.collection.insert_one(doc)
        except PyMongoError:
            logger.exception("Failed to save contact submission from %s", form.email)

    async def submit(
        self,
        form: ContactForm,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ActionResult:
        if form.recaptchaToken and not await verify_recaptcha(form.recaptchaToken):
            return ActionResult(success=False, message="reCAPTCHA verification failed. Please try again.")

        if not await self.check_rate_limit(form.email, ip_address):
            logger.warning("Contact rate limit hit: email=%s ip=%s", form.email, ip_address)
            return ActionResult(
                success=False,
                message="Too many submissions. Please wait before submitting again.",
            )

        received_at = utcnow().strftime("%Y-%m-%d %H:%M UTC")
        html_body, text_body = notification_email(form, received_at)
        sent = await run_in_threadpool(
            send_email_ses,
            settings.CONTACT_NOTIFY_EMAIL or settings.ADMIN_EMAIL,
            f"New Contact: {form.subject}",
            html_body,
            text_body,
            form.email,
        )
        if not sent:
            return ActionResult(
                success=False,
                message="Failed to send your message. Please try again or contact me directly.",
            )

        confirmed = await run_in_threadpool(
            send_email_ses, form.email, "Thanks for reaching out!", confirmation_email(form)
        )
        if not confirmed:
            logger.warning("Confirmation email to %s failed", form.email)

        await self.save_submission(
            form,
            {"ipAddress": ip_address, "userAgent": user_agent, "source": SUBMISSION_SOURCE},
        )
        return ActionResult(
            success=True,
            message="Thanks for your message! I'll get back to you within 24 hours.",
        )
