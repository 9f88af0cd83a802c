"""Shared-secret admin check for the broadcast and stats endpoints"""

import hmac
from functools import wraps
from flask import request, jsonify, current_app
from .errors import Unauthorized
from .logging_service import db_log

ADMIN_KEY_HEADER = 'x-admin-key'


def check_admin_key(provided, expected):
    """Constant-time comparison. An unset admin key never matches."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


def require_admin_key():
    """Raise Unauthorized unless the request carries the configured admin key"""
    provided = request.headers.get(ADMIN_KEY_HEADER)
    if not check_admin_key(provided, current_app.config.get('ADMIN_KEY')):
        raise Unauthorized()


def admin_key_required(f):
    """Decorator to require the x-admin-key header"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            require_admin_key()
        except Unauthorized as e:
            db_log('warning', 'security', 'Rejected admin request', {
                'header_present': bool(request.headers.get(ADMIN_KEY_HEADER)),
            })
            return jsonify({'success': False, 'message': e.message}), e.status_code
        return f(*args, **kwargs)

    return decorated_function
