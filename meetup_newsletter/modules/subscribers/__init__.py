"""
Subscribers Module
==================

Provides:
- POST /subscribe -- start a double opt-in subscription
- GET /verify -- confirm an address with its token
- GET /unsubscribe -- remove a subscriber with its token
- GET /stats -- subscriber counts (x-admin-key header required)

Exported helpers:
- SubscriberStore
- subscribe, verify, unsubscribe (lifecycle operations)
"""

from flask import Blueprint

subscribers_bp = Blueprint('subscribers', __name__)

from .store import SubscriberStore  # noqa: E402
from .lifecycle import subscribe, unsubscribe, verify  # noqa: E402
from . import routes  # noqa: E402,F401

__all__ = ['subscribers_bp', 'SubscriberStore', 'subscribe', 'unsubscribe', 'verify']
