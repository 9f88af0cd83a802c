"""
Shared fixtures for the newsletter test-suite.

Run with: pytest -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile
from datetime import datetime

import pytest

from meetup_newsletter import create_app
from meetup_newsletter.core.tokens import generate_token
from meetup_newsletter.modules.subscribers.store import SubscriberStore

SITE_URL = 'https://meetups.example.com'
ADMIN_KEY = 'test-admin-key'


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="newsletter-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app_config(tmp_db_dir):
    """Config overrides for a dev-mode app (no Resend key, no fallback link)."""
    return {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///' + os.path.join(tmp_db_dir, 'newsletter.db'),
        'SITE_URL': SITE_URL,
        'ADMIN_KEY': ADMIN_KEY,
        'RESEND_API_KEY': None,
        'EMAIL_FROM': 'Test Meetups <noreply@example.com>',
        'EMAIL_BRAND_NAME': 'Tech Moncton',
        'VERIFY_PATH': '/en/verify',
        'UNSUBSCRIBE_PATH': '/en/unsubscribe',
        'EVENTS_PATH': '/en/events',
        'UPDATE_FALLBACK_LINK': None,
        'BROADCAST_MAX_WORKERS': 3,
    }


@pytest.fixture
def app(app_config):
    """Fully initialised Flask app with all newsletter modules registered."""
    return create_app(app_config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def newsletter(app):
    return app.extensions['newsletter']


@pytest.fixture
def add_subscriber(app):
    """Insert a subscriber directly through the store; returns its token."""
    def _add(email, verified=False):
        token = generate_token()
        with app.app_context():
            subscriber = SubscriberStore.insert(email, token)
            if verified:
                SubscriberStore.mark_verified(subscriber.id, datetime.now())
        return token
    return _add


@pytest.fixture
def get_subscriber(app):
    """Read a subscriber back as a plain dict (or None)."""
    def _get(email):
        with app.app_context():
            subscriber = SubscriberStore.find_by_email(email)
            if subscriber is None:
                return None
            return {
                'id': subscriber.id,
                'email': subscriber.email,
                'verified': subscriber.verified,
                'verification_token': subscriber.verification_token,
                'verified_at': subscriber.verified_at,
            }
    return _get
