"""
Centralized logging service for the newsletter service.
Writes notable events to the app_logs table (survives container rebuilds)
on top of the regular stdout logger.
"""

import json
import logging
from datetime import datetime
from flask import request, has_request_context, has_app_context
from .database import db

logger = logging.getLogger(__name__)


class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    level = db.Column(db.String(16), nullable=False, index=True)
    source = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    request_path = db.Column(db.String(255))

    def __repr__(self):
        return f'<AppLog {self.level} {self.source}>'


def _get_request_context():
    """Extract ip address and path of the current request, if any"""
    if not has_request_context():
        return None, None

    ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
    if ip_address and ',' in ip_address:
        ip_address = ip_address.split(',')[0].strip()
    return ip_address, request.path


def db_log(level, source, message, details=None):
    """
    Log a message to stdout and to the app_logs table.

    Args:
        level (str): Log level (debug, info, warning, error, critical)
        source (str): Source component (subscribers, broadcast, events, ...)
        message (str): Main log message
        details (str/dict): Additional details (JSON-encoded if dict)
    """
    level = level.upper()
    logger.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

    if not has_app_context():
        return

    if isinstance(details, dict):
        details = json.dumps(details, default=str)

    ip_address, request_path = _get_request_context()

    try:
        # Own transaction so a failed request session cannot swallow the entry
        with db.engine.begin() as conn:
            conn.execute(AppLog.__table__.insert().values(
                timestamp=datetime.now(),
                level=level,
                source=source,
                message=message,
                details=details,
                ip_address=ip_address,
                request_path=request_path,
            ))
    except Exception as e:
        logger.warning(f"Logging service error: {e}")
        if details:
            logger.warning(f"Details: {details}")
