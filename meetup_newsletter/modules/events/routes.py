"""
Events Routes
=============

Read-only event listing for the site front-end.

- GET /events?when=upcoming (default) | past | all
"""

import logging
from flask import request, jsonify, current_app
from . import events_bp

logger = logging.getLogger(__name__)

VALID_SCOPES = ('upcoming', 'past', 'all')


@events_bp.route('', methods=['GET'])
def list_events():
    """List events from the public feed"""
    when = request.args.get('when', 'upcoming').lower()
    if when not in VALID_SCOPES:
        return jsonify({
            'success': False,
            'message': f"'when' must be one of: {', '.join(VALID_SCOPES)}"
        }), 400

    source = current_app.extensions['newsletter'].event_source
    try:
        if when == 'upcoming':
            events = source.list_upcoming()
        elif when == 'past':
            events = source.list_past()
        else:
            events = source.fetch_all_events()
    except Exception as e:
        logger.error(f"Error listing events: {e}")
        return jsonify({'success': False, 'message': 'An error occurred'}), 500

    return jsonify({'success': True, 'events': events}), 200
