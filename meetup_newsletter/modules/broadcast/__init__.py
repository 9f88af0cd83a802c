"""
Broadcast Module
================

Provides:
- POST /send-update -- email the next upcoming event to all verified
  subscribers (x-admin-key header required)
"""

from flask import Blueprint

broadcast_bp = Blueprint('broadcast', __name__)

from .dispatcher import BroadcastDispatcher, DeliveryTally  # noqa: E402
from . import routes  # noqa: E402,F401

__all__ = ['broadcast_bp', 'BroadcastDispatcher', 'DeliveryTally']
