"""
Email Service Module
====================

Sends templated HTML email through the Resend API.
When RESEND_API_KEY is not configured nothing leaves the process: the
message is written to the log instead and the send counts as successful,
so local development never needs a provider account.
"""

import logging
from typing import Dict, Optional

import requests
from markupsafe import escape

from meetup_newsletter.core.errors import DeliveryError
from meetup_newsletter.modules.events.service import format_event_date

logger = logging.getLogger(__name__)

RESEND_API_URL = 'https://api.resend.com/emails'
DEFAULT_FROM = 'Tech Moncton <noreply@monctontechhive.ca>'


class EmailService:
    """
    Resend-backed email service.

    Configuration (set in Flask app.config):
        RESEND_API_KEY: Resend API key (unset = development mode, log only)
        EMAIL_FROM: Sender address (default: Tech Moncton <noreply@monctontechhive.ca>)
        EMAIL_BRAND_NAME: Brand name used in subjects and headings
        SITE_URL: Public site, used to build links
        VERIFY_PATH / UNSUBSCRIBE_PATH / EVENTS_PATH: Site pages linked from emails
        REQUEST_TIMEOUT: Seconds to wait for the provider
    """

    def __init__(self, app=None):
        self.api_key = None
        self.sender_email = DEFAULT_FROM
        self.brand_name = 'Tech Moncton'
        self.site_url = 'http://localhost:4321'
        self.verify_path = '/en/verify'
        self.unsubscribe_path = '/en/unsubscribe'
        self.events_path = '/en/events'
        self.timeout = 30

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.api_key = app.config.get('RESEND_API_KEY') or None
        self.sender_email = app.config.get('EMAIL_FROM') or DEFAULT_FROM
        self.brand_name = app.config.get('EMAIL_BRAND_NAME', self.brand_name)
        self.site_url = app.config.get('SITE_URL', self.site_url).rstrip('/')
        self.verify_path = app.config.get('VERIFY_PATH', self.verify_path)
        self.unsubscribe_path = app.config.get('UNSUBSCRIBE_PATH', self.unsubscribe_path)
        self.events_path = app.config.get('EVENTS_PATH', self.events_path)
        self.timeout = app.config.get('REQUEST_TIMEOUT', self.timeout)

        if self.api_key:
            logger.info(f"Email service initialized (Resend, sender: {self.sender_email})")
        else:
            logger.warning("RESEND_API_KEY not configured - emails will only be logged")

    @property
    def dev_mode(self):
        return not self.api_key

    # ==================== Links ====================

    def verify_url(self, token: str) -> str:
        return f"{self.site_url}{self.verify_path}?token={token}"

    def unsubscribe_url(self, token: str) -> str:
        return f"{self.site_url}{self.unsubscribe_path}?token={token}"

    def events_url(self) -> str:
        return f"{self.site_url}{self.events_path}"

    # ==================== Sending ====================

    def send_email(self, to: str, subject: str, html_body: str,
                   links: Optional[Dict[str, str]] = None) -> bool:
        """
        Send one email.

        Args:
            to: Recipient address
            subject: Email subject
            html_body: HTML content of the email
            links: Named links inside the email, only used for the dev-mode log

        Returns:
            bool: True once the provider accepted the message (or in dev mode)

        Raises:
            DeliveryError: transport failure or non-2xx answer from the provider
        """
        if self.dev_mode:
            logger.info(f"[DEV] Would send to: {to}")
            logger.info(f"[DEV] Subject: {subject}")
            for name, url in (links or {}).items():
                logger.info(f"[DEV] {name} URL: {url}")
            return True

        try:
            response = requests.post(
                RESEND_API_URL,
                headers={'Authorization': f'Bearer {self.api_key}'},
                json={
                    'from': self.sender_email,
                    'to': to,
                    'subject': subject,
                    'html': html_body,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(f"Resend request failed for {to}: {e}") from e

        if not response.ok:
            raise DeliveryError(
                f"Resend rejected email to {to}: {response.status_code} {response.text[:200]}"
            )

        logger.debug(f"Email sent successfully to: {to}")
        return True

    # ==================== Verification Email ====================

    def send_verification_email(self, email: str, token: str) -> bool:
        """Send the double opt-in link for a (re)subscription"""
        verify_url = self.verify_url(token)
        unsubscribe_url = self.unsubscribe_url(token)
        subject = f"Verify your {self.brand_name} subscription"
        html_body = self._get_verification_template(verify_url, unsubscribe_url)

        return self.send_email(email, subject, html_body, links={
            'Verification': verify_url,
            'Unsubscribe': unsubscribe_url,
        })

    def _get_verification_template(self, verify_url: str, unsubscribe_url: str) -> str:
        brand = escape(self.brand_name)
        return f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: system-ui, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="color: #3b82f6;">{brand}</h1>
    <p>Thanks for subscribing to {brand} updates!</p>
    <p>Please click the button below to verify your email address:</p>
    <p style="margin: 30px 0;">
        <a href="{escape(verify_url)}"
           style="background: #3b82f6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
            Verify Email
        </a>
    </p>
    <p style="color: #666; font-size: 14px;">
        Or copy this link: <a href="{escape(verify_url)}">{escape(verify_url)}</a>
    </p>
    <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
    <p style="color: #999; font-size: 12px;">
        If you didn't subscribe to {brand}, you can ignore this email or
        <a href="{escape(unsubscribe_url)}" style="color: #999;">unsubscribe</a>.
    </p>
</body>
</html>
        """

    # ==================== Update Email ====================

    def get_update_subject(self, event: Optional[dict]) -> str:
        if event:
            return f"Upcoming Event: {event.get('topic', '')}"
        return f"{self.brand_name} Update"

    def get_update_html(self, event: Optional[dict], unsubscribe_url: str,
                        fallback_link: Optional[str] = None) -> str:
        """Event announcement when there is an event, generic update otherwise"""
        if event:
            body = self._get_event_block(event)
        else:
            body = self._get_fallback_block(fallback_link)

        return f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: system-ui, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="color: #3b82f6;">{escape(self.brand_name)}</h1>
    {body}
    <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
    <p style="color: #999; font-size: 12px;">
        You're receiving this because you subscribed to {escape(self.brand_name)} updates.
        <a href="{escape(unsubscribe_url)}" style="color: #999;">Unsubscribe</a>
    </p>
</body>
</html>
        """

    def _get_event_block(self, event: dict) -> str:
        return f"""
    <p>We have an upcoming event you won't want to miss!</p>

    <div style="background: #f8fafc; border-radius: 8px; padding: 20px; margin: 20px 0;">
        <h2 style="margin-top: 0; color: #1e293b;">{escape(event.get('topic', ''))}</h2>
        <p style="color: #64748b; margin-bottom: 8px;"><strong>Speaker:</strong> {escape(event.get('presentation', ''))}</p>
        <p style="color: #64748b; margin-bottom: 8px;"><strong>Date:</strong> {escape(format_event_date(event.get('date', '')))}</p>
        <p style="color: #64748b; margin-bottom: 0;"><strong>Time:</strong> {escape(event.get('time', ''))}</p>
    </div>

    <p style="margin: 30px 0;">
        <a href="{escape(self.events_url())}"
           style="background: #3b82f6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
            View All Events
        </a>
    </p>
        """

    def _get_fallback_block(self, fallback_link: Optional[str]) -> str:
        return f"""
    <p>Check out what's happening at {escape(self.brand_name)}!</p>

    <p style="margin: 30px 0;">
        <a href="{escape(fallback_link or self.site_url)}"
           style="background: #3b82f6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
            Learn More
        </a>
    </p>
        """
