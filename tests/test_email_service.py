"""
Email service tests: dev-mode fallback, Resend requests and templates.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests
from flask import Flask

from meetup_newsletter.core.errors import DeliveryError
from meetup_newsletter.modules.email.email_service import RESEND_API_URL, EmailService

POST_TARGET = 'meetup_newsletter.modules.email.email_service.requests.post'


def _service(**config):
    app = Flask(__name__)
    app.config.update({
        'SITE_URL': 'https://meetups.example.com/',
        'EMAIL_BRAND_NAME': 'Test Meetups',
        'REQUEST_TIMEOUT': 5,
    })
    app.config.update(config)
    return EmailService(app)


def _provider_response(status_code=200, text='{"id": "abc"}'):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    return response


# ---------------------------------------------------------------------------
# 1. Development fallback
# ---------------------------------------------------------------------------

def test_dev_mode_makes_no_network_call(caplog):
    svc = _service(RESEND_API_KEY=None)
    caplog.set_level(logging.INFO, logger='meetup_newsletter.modules.email.email_service')

    with patch(POST_TARGET) as post:
        assert svc.send_email('someone@example.com', 'Hello', '<p>hi</p>') is True

    post.assert_not_called()
    assert svc.dev_mode is True
    assert '[DEV] Would send to: someone@example.com' in caplog.text


def test_dev_mode_logs_verification_and_unsubscribe_links(caplog):
    svc = _service(RESEND_API_KEY='')
    caplog.set_level(logging.INFO, logger='meetup_newsletter.modules.email.email_service')

    svc.send_verification_email('someone@example.com', 'tok-123')

    assert '[DEV] Verification URL: https://meetups.example.com/en/verify?token=tok-123' in caplog.text
    assert '[DEV] Unsubscribe URL: https://meetups.example.com/en/unsubscribe?token=tok-123' in caplog.text


# ---------------------------------------------------------------------------
# 2. Resend delivery
# ---------------------------------------------------------------------------

def test_resend_request_shape():
    svc = _service(RESEND_API_KEY='re_test_key', EMAIL_FROM='Meetups <hi@example.com>')

    with patch(POST_TARGET, return_value=_provider_response()) as post:
        assert svc.send_email('someone@example.com', 'Subject', '<p>Body</p>') is True

    post.assert_called_once()
    args, kwargs = post.call_args
    assert args[0] == RESEND_API_URL
    assert kwargs['headers']['Authorization'] == 'Bearer re_test_key'
    assert kwargs['json'] == {
        'from': 'Meetups <hi@example.com>',
        'to': 'someone@example.com',
        'subject': 'Subject',
        'html': '<p>Body</p>',
    }
    assert kwargs['timeout'] == 5


def test_default_from_address_when_not_configured():
    svc = _service(RESEND_API_KEY='re_test_key', EMAIL_FROM=None)

    with patch(POST_TARGET, return_value=_provider_response()) as post:
        svc.send_email('someone@example.com', 'Subject', '<p>Body</p>')

    assert post.call_args.kwargs['json']['from'] == 'Tech Moncton <noreply@monctontechhive.ca>'


def test_non_success_status_raises_delivery_error():
    svc = _service(RESEND_API_KEY='re_test_key')

    with patch(POST_TARGET, return_value=_provider_response(422, '{"message": "invalid to"}')):
        with pytest.raises(DeliveryError):
            svc.send_email('someone@example.com', 'Subject', '<p>Body</p>')


def test_transport_error_raises_delivery_error():
    svc = _service(RESEND_API_KEY='re_test_key')

    with patch(POST_TARGET, side_effect=requests.Timeout('read timed out')):
        with pytest.raises(DeliveryError):
            svc.send_email('someone@example.com', 'Subject', '<p>Body</p>')


# ---------------------------------------------------------------------------
# 3. Templates
# ---------------------------------------------------------------------------

def test_update_email_for_event():
    svc = _service()
    event = {'date': '2025-01-15', 'time': '6:00 PM', 'topic': 'Rust & <Python>', 'presentation': 'Ada'}

    assert svc.get_update_subject(event) == 'Upcoming Event: Rust & <Python>'
    html = svc.get_update_html(event, 'https://meetups.example.com/en/unsubscribe?token=t1')

    assert 'Rust &amp; &lt;Python&gt;' in html, "feed text must be HTML-escaped"
    assert 'Wednesday, January 15, 2025' in html
    assert 'https://meetups.example.com/en/events' in html
    assert 'https://meetups.example.com/en/unsubscribe?token=t1' in html


def test_update_email_fallback():
    svc = _service()

    assert svc.get_update_subject(None) == 'Test Meetups Update'
    html = svc.get_update_html(None, 'https://meetups.example.com/en/unsubscribe?token=t2',
                               fallback_link='https://example.com/community')

    assert 'https://example.com/community' in html
    assert 'Learn More' in html
    assert 'token=t2' in html
