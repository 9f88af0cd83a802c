"""
Subscription Lifecycle
======================

State machine per email address:

    absent --subscribe--> unverified --verify--> verified
    unverified --subscribe--> unverified (new token, old one invalidated)
    unverified/verified --unsubscribe--> absent (hard delete)

Each operation is independent and stateless; the store is the only
coordination point. Responses are deliberately identical wherever a
different answer would reveal whether an address is subscribed.
"""

import re
import logging
from datetime import datetime
from meetup_newsletter.core.errors import Conflict, InvalidInput, NotFound
from meetup_newsletter.core.logging_service import db_log
from meetup_newsletter.core.tokens import generate_token, is_valid_token
from .store import SubscriberStore

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]{2,}$')
MAX_EMAIL_LENGTH = 254
MAX_LOCAL_PART_LENGTH = 64

# Same text for new, unverified and verified addresses
SUBSCRIBE_MESSAGE = 'Please check your email to verify your subscription'
UNSUBSCRIBE_MESSAGE = 'You have been unsubscribed'
VERIFIED_MESSAGE = 'Email verified successfully'
ALREADY_VERIFIED_MESSAGE = 'Email already verified'


def normalize_email(email):
    return email.strip().lower()


def validate_email(email):
    """Validate email format and RFC length limits"""
    if not EMAIL_REGEX.match(email):
        return False
    if len(email) > MAX_EMAIL_LENGTH:
        return False
    local_part = email.split('@')[0]
    return len(local_part) <= MAX_LOCAL_PART_LENGTH


def _require_token(token):
    if not token:
        raise InvalidInput('Token is required')
    if not is_valid_token(token):
        raise InvalidInput('Invalid token format')


def subscribe(email, email_service):
    """
    Start (or restart) a subscription and send the verification email.

    Returns the response message. Raises InvalidInput for a bad address,
    StoreError if the database fails and DeliveryError if the
    verification email could not be sent.
    """
    if not email or not isinstance(email, str):
        raise InvalidInput('Email is required')

    email = normalize_email(email)
    if not validate_email(email):
        raise InvalidInput('Invalid email format')

    existing = SubscriberStore.find_by_email(email)

    if existing and existing.verified:
        logger.info(f"Subscribe request for already verified address: {email}")
        return SUBSCRIBE_MESSAGE

    token = generate_token()
    if existing:
        SubscriberStore.update_token(existing.id, token)
        logger.info(f"Regenerated verification token for: {email}")
    else:
        try:
            SubscriberStore.insert(email, token)
        except Conflict:
            # Lost an insert race against another request for the same address
            logger.info(f"Concurrent subscribe for: {email}")
            return SUBSCRIBE_MESSAGE
        db_log('info', 'subscribers', f'New subscriber: {email}')

    email_service.send_verification_email(email, token)
    return SUBSCRIBE_MESSAGE


def verify(token, now=None):
    """Confirm ownership of an address. Safe to repeat."""
    _require_token(token)

    subscriber = SubscriberStore.find_by_token(token)
    if subscriber is None:
        raise NotFound('Invalid or expired token')

    if subscriber.verified:
        return ALREADY_VERIFIED_MESSAGE

    if not SubscriberStore.mark_verified(subscriber.id, now or datetime.now()):
        return ALREADY_VERIFIED_MESSAGE
    db_log('info', 'subscribers', f'Subscriber verified: {subscriber.email}')
    return VERIFIED_MESSAGE


def unsubscribe(token):
    """Remove the subscriber owning a token. Unknown tokens succeed silently."""
    _require_token(token)

    subscriber = SubscriberStore.find_by_token(token)
    if subscriber is None:
        return UNSUBSCRIBE_MESSAGE

    email = subscriber.email
    SubscriberStore.delete_by_id(subscriber.id)
    db_log('info', 'subscribers', f'Unsubscribed: {email}')
    return UNSUBSCRIBE_MESSAGE
