"""
Broadcast Routes
================

- POST /send-update -- run one broadcast (x-admin-key header required)
"""

import logging
from flask import jsonify, current_app
from meetup_newsletter.core.auth import admin_key_required
from meetup_newsletter.core.errors import StoreError
from meetup_newsletter.core.logging_service import db_log
from . import broadcast_bp

logger = logging.getLogger(__name__)


@broadcast_bp.route('/send-update', methods=['POST'])
@admin_key_required
def send_update():
    """Send the next-event update to every verified subscriber"""
    dispatcher = current_app.extensions['newsletter'].dispatcher
    try:
        tally = dispatcher.dispatch()
    except StoreError as e:
        logger.error(f"Database error in send_update: {e}")
        db_log('error', 'broadcast', 'Failed to fetch subscribers', {'error': str(e)})
        return jsonify({'success': False, 'message': 'Failed to fetch subscribers'}), 500
    except Exception as e:
        logger.error(f"Error in send_update: {e}")
        db_log('error', 'broadcast', 'Error in send_update', {'error': str(e)})
        return jsonify({'success': False, 'message': 'An error occurred'}), 500

    if tally.skipped:
        return jsonify(dict(
            tally.to_dict(),
            success=True,
            message='No upcoming events and no UPDATE_FALLBACK_LINK defined. Email not sent.',
        )), 200

    if tally.recipients == 0:
        return jsonify(dict(tally.to_dict(), success=True, message='No verified subscribers')), 200

    message = f"Update sent to {tally.sent} subscribers"
    if tally.failed > 0:
        message += f", {tally.failed} failed"

    db_log('info', 'broadcast', message, tally.to_dict())
    return jsonify(dict(tally.to_dict(), success=True, message=message)), 200
