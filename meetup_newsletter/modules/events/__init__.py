"""
Events Module
=============

Provides:
- GET /events -- upcoming, past or all meetup events from the public feed

Exported helpers:
- EventSource (feed adapter used by the broadcast)
- parse_event_date, format_event_date, get_upcoming_events, get_past_events
"""

from flask import Blueprint

events_bp = Blueprint('events', __name__, url_prefix='/events')

from .service import (  # noqa: E402
    EventSource,
    format_event_date,
    get_past_events,
    get_upcoming_events,
    parse_event_date,
)
from . import routes  # noqa: E402,F401

__all__ = [
    'events_bp',
    'EventSource',
    'format_event_date',
    'get_past_events',
    'get_upcoming_events',
    'parse_event_date',
]
