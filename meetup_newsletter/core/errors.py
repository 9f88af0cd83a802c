"""
Newsletter Errors
=================

Exception taxonomy shared by the subscription lifecycle, the broadcast
dispatcher and the adapters. Each error carries the HTTP status a route
should answer with and a message that is safe to show to the caller.
"""


class NewsletterError(Exception):
    """Base class for every error the newsletter service raises on purpose"""

    status_code = 500
    default_message = 'An error occurred'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(NewsletterError):
    """Malformed email or token - correctable by the user"""
    status_code = 400
    default_message = 'Invalid input'


class Unauthorized(NewsletterError):
    """Missing or wrong admin key"""
    status_code = 401
    default_message = 'Unauthorized'


class NotFound(NewsletterError):
    """Token matches no subscriber (verify only)"""
    status_code = 404
    default_message = 'Invalid or expired token'


class Conflict(NewsletterError):
    """Unique constraint hit on insert (email or token already present)"""
    status_code = 409
    default_message = 'Already subscribed'


class DeliveryError(NewsletterError):
    """The mail provider did not accept a message"""
    status_code = 502
    default_message = 'Failed to send email'


class StoreError(NewsletterError):
    """The subscriber database is unavailable or rejected a query"""
    status_code = 500


class UpstreamFetchError(NewsletterError):
    """The public event feed could not be read"""
    status_code = 500
