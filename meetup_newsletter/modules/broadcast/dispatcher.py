"""
Broadcast Dispatcher
====================

One broadcast = one "next event" (or fallback) email to every verified
subscriber. Recipients are read once up front, then sent on a bounded
thread pool; every send captures its own failure so one bad address or
provider hiccup never stops the rest.

Two broadcasts running at the same time are not deduplicated against each
other and will both send.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional

from meetup_newsletter.core.errors import DeliveryError
from meetup_newsletter.modules.subscribers.store import SubscriberStore

logger = logging.getLogger(__name__)


@dataclass
class DeliveryTally:
    sent: int = 0
    failed: int = 0
    event_topic: Optional[str] = None
    recipients: int = 0
    skipped: bool = False

    def record(self, delivered):
        if delivered:
            self.sent += 1
        else:
            self.failed += 1

    def to_dict(self):
        return {
            'sent': self.sent,
            'failed': self.failed,
            'event': self.event_topic,
        }


class BroadcastDispatcher:

    def __init__(self, email_service, event_source, fallback_link=None, max_workers=4):
        self.email_service = email_service
        self.event_source = event_source
        self.fallback_link = fallback_link or None
        self.max_workers = max(1, int(max_workers))

    def dispatch(self, today=None):
        """
        Run one broadcast and return its DeliveryTally.

        With no upcoming event and no fallback link nothing is sent and the
        tally comes back with skipped=True. StoreError from reading the
        recipients propagates; delivery failures never do.
        """
        event = self.event_source.next_upcoming(today)
        if event is None and not self.fallback_link:
            logger.info("No upcoming event and no fallback link - broadcast skipped")
            return DeliveryTally(skipped=True)

        recipients = [
            (subscriber.email, subscriber.verification_token)
            for subscriber in SubscriberStore.list_verified()
        ]
        tally = DeliveryTally(
            event_topic=event.get('topic') if event else None,
            recipients=len(recipients),
        )
        if not recipients:
            return tally

        subject = self.email_service.get_update_subject(event)
        logger.info(f"Broadcasting '{subject}' to {len(recipients)} subscribers")

        workers = min(self.max_workers, len(recipients))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._deliver, email, token, subject, event)
                for email, token in recipients
            ]
            for future in as_completed(futures):
                tally.record(future.result())

        if tally.failed > 0:
            logger.warning(f"Broadcast completed with errors: {tally.sent} sent, {tally.failed} failed")
        else:
            logger.info(f"Broadcast sent successfully to {tally.sent} subscribers")
        return tally

    def _deliver(self, email, token, subject, event):
        """Send to one recipient. Returns True if delivered."""
        unsubscribe_url = self.email_service.unsubscribe_url(token)
        html_body = self.email_service.get_update_html(event, unsubscribe_url, self.fallback_link)
        try:
            self.email_service.send_email(email, subject, html_body, links={
                'Unsubscribe': unsubscribe_url,
            })
            return True
        except DeliveryError as e:
            logger.error(f"Delivery failed for {email}: {e}")
            return False
        except Exception as e:
            logger.error(f"Error sending to {email}: {e}")
            return False
