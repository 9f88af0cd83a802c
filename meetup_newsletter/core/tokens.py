"""Verification / unsubscribe tokens"""

import re
import uuid

# Canonical 8-4-4-4-12 hex UUID, any case
TOKEN_REGEX = re.compile(
    r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}',
    re.IGNORECASE
)


def generate_token():
    """Generate a new random token (uuid4 draws from os.urandom)"""
    return str(uuid.uuid4())


def is_valid_token(token):
    """Check that a token has the UUID shape before it is used in a lookup"""
    if not token or not isinstance(token, str):
        return False
    return TOKEN_REGEX.fullmatch(token) is not None
