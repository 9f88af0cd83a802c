"""
Subscribers Models
==================

The subscriber record is the only shared state between the subscribe,
verify, unsubscribe and send-update handlers.
"""

from datetime import datetime
from meetup_newsletter.core.database import db


class Subscriber(db.Model):
    __tablename__ = 'subscribers'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    verified = db.Column(db.Boolean, nullable=False, default=False, index=True)
    verification_token = db.Column(db.String(36), unique=True, nullable=False, index=True)
    verified_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    @property
    def state(self):
        return 'verified' if self.verified else 'unverified'

    def __repr__(self):
        return f'<Subscriber {self.email} ({self.state})>'
