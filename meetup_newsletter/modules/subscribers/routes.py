"""
Subscribers Routes
==================

Provides:
- POST /subscribe -- body {email}
- GET /verify?token=<uuid>
- GET /unsubscribe?token=<uuid>
- GET /stats -- total and verified counts (admin key required)

Every response is {success, message}. Error bodies never carry exception
text; the detail goes to the log instead.
"""

import logging
from flask import request, jsonify, current_app
from meetup_newsletter.core.auth import admin_key_required
from meetup_newsletter.core.errors import NewsletterError, DeliveryError, StoreError
from meetup_newsletter.core.logging_service import db_log
from . import subscribers_bp
from . import lifecycle
from .store import SubscriberStore

logger = logging.getLogger(__name__)


def _get_email_service():
    return current_app.extensions['newsletter'].email_service


def _ok(message):
    return jsonify({'success': True, 'message': message}), 200


def _fail(message, status_code):
    return jsonify({'success': False, 'message': message}), status_code


def _handle_error(operation, error):
    """Turn a lifecycle error into a response, logging server-side failures"""
    if isinstance(error, (StoreError, DeliveryError)):
        logger.error(f"{type(error).__name__} in {operation}: {error}")
        db_log('error', 'subscribers', f'{type(error).__name__} in {operation}', {'error': str(error)})
        return _fail('An error occurred', 500)

    if isinstance(error, NewsletterError):
        return _fail(error.message, error.status_code)

    logger.error(f"Error in {operation}: {error}")
    db_log('error', 'subscribers', f'Error in {operation}', {'error': str(error)})
    return _fail('An error occurred', 500)


# ===================
# PUBLIC API ROUTES
# ===================

@subscribers_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """Handle new subscription requests"""
    data = request.get_json(silent=True)
    email = data.get('email') if isinstance(data, dict) else None

    try:
        message = lifecycle.subscribe(email, _get_email_service())
    except Exception as e:
        return _handle_error('subscribe', e)
    return _ok(message)


@subscribers_bp.route('/verify', methods=['GET'])
def verify():
    """Confirm a subscription"""
    try:
        message = lifecycle.verify(request.args.get('token'))
    except Exception as e:
        return _handle_error('verify', e)
    return _ok(message)


@subscribers_bp.route('/unsubscribe', methods=['GET'])
def unsubscribe():
    """Handle unsubscribe links"""
    try:
        message = lifecycle.unsubscribe(request.args.get('token'))
    except Exception as e:
        return _handle_error('unsubscribe', e)
    return _ok(message)


# ===================
# ADMIN ROUTES
# ===================

@subscribers_bp.route('/stats', methods=['GET'])
@admin_key_required
def get_subscriber_stats():
    """Get subscriber statistics"""
    try:
        total = SubscriberStore.count()
        verified = SubscriberStore.count(verified=True)
    except Exception as e:
        return _handle_error('stats', e)

    return jsonify({
        'success': True,
        'total': total,
        'verified': verified,
    }), 200
