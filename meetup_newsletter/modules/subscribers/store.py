"""
Subscriber Store
================

Single-record reads and writes against the subscribers table.
Every mutating call commits on its own, so per-record atomicity is whatever
the database gives a single transaction. Callers never hold a transaction
across calls.
"""

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from meetup_newsletter.core.database import db
from meetup_newsletter.core.errors import Conflict, StoreError
from .models import Subscriber

logger = logging.getLogger(__name__)


class SubscriberStore:

    @staticmethod
    def find_by_email(email):
        try:
            return Subscriber.query.filter_by(email=email).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"find_by_email failed: {e}") from e

    @staticmethod
    def find_by_token(token):
        try:
            return Subscriber.query.filter_by(verification_token=token).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"find_by_token failed: {e}") from e

    @staticmethod
    def insert(email, token):
        """
        Insert a new unverified subscriber.
        Raises Conflict if the email (or token) is already taken.
        """
        subscriber = Subscriber(email=email, verification_token=token, verified=False)
        try:
            db.session.add(subscriber)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise Conflict(f"Subscriber already exists: {email}") from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"insert failed: {e}") from e
        return subscriber

    @staticmethod
    def update_token(subscriber_id, token):
        SubscriberStore._update(subscriber_id, {Subscriber.verification_token: token})

    @staticmethod
    def mark_verified(subscriber_id, timestamp):
        """
        Flip an unverified record to verified. Returns the number of rows
        changed, so 0 means another request verified it first.
        """
        return SubscriberStore._update(subscriber_id, {
            Subscriber.verified: True,
            Subscriber.verified_at: timestamp,
        }, verified=False)

    @staticmethod
    def delete_by_id(subscriber_id):
        try:
            deleted = Subscriber.query.filter_by(id=subscriber_id).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"delete failed: {e}") from e
        return deleted

    @staticmethod
    def list_verified():
        """All verified subscribers, each exactly once"""
        try:
            return Subscriber.query.filter_by(verified=True).order_by(Subscriber.id).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"list_verified failed: {e}") from e

    @staticmethod
    def count(verified=None):
        try:
            query = Subscriber.query
            if verified is not None:
                query = query.filter_by(verified=verified)
            return query.count()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"count failed: {e}") from e

    @staticmethod
    def _update(subscriber_id, values, **conditions):
        # Unique violations here (a token collision) are plain store failures
        try:
            updated = Subscriber.query.filter_by(id=subscriber_id, **conditions).update(values)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Subscriber update failed for id {subscriber_id}: {e}")
            raise StoreError(f"update failed: {e}") from e
        return updated
