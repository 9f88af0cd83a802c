"""
Event Source
============

Reads the public meetup feed: one JSON document per year, each a list of
{date, time, topic, presentation} objects. A missing or broken document
reads as "no events that year" so the site and the broadcast keep working
when the feed is unavailable.
"""

import re
import logging
from datetime import date, datetime
from typing import List, Optional

import requests

from meetup_newsletter.core.errors import UpstreamFetchError

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = 'https://raw.githubusercontent.com/TechMoncton/Meetups/main/MeetUps%20{year}/MeetUps%20{year}.json'

ISO_DATE_REGEX = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')
ORDINAL_REGEX = re.compile(r'(\d+)(st|nd|rd|th)\b', re.IGNORECASE)

# Month-name formats seen in the feed ("January 15, 2025", "Jan 15 2025", ...)
MONTH_NAME_FORMATS = [
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
    '%A, %B %d, %Y',
    '%a, %b %d, %Y',
]


# ===================
# DATE HELPERS
# ===================

def parse_event_date(text) -> Optional[date]:
    """
    Parse an event date. Accepts ISO dates (and the date part of ISO
    datetimes) or month-name dates. Returns None if the text is not a date.
    """
    if not text or not isinstance(text, str):
        return None

    text = text.strip()
    match = ISO_DATE_REGEX.match(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return None

    cleaned = ORDINAL_REGEX.sub(r'\1', ' '.join(text.split()))
    for fmt in MONTH_NAME_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def format_event_date(text) -> str:
    """Long display form, e.g. 'Wednesday, January 15, 2025'"""
    parsed = parse_event_date(text)
    if parsed is None:
        return text or ''
    return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year}"


def is_upcoming(event, today=None) -> bool:
    """True if the event is today or later. Unparsable dates are never upcoming."""
    event_date = parse_event_date(event.get('date'))
    if event_date is None:
        return False
    return event_date >= (today or date.today())


def sort_by_date(events, ascending=True) -> List[dict]:
    """Sort by date; events without a usable date always go last"""
    dated = [e for e in events if parse_event_date(e.get('date')) is not None]
    undated = [e for e in events if parse_event_date(e.get('date')) is None]
    dated.sort(key=lambda e: parse_event_date(e.get('date')), reverse=not ascending)
    return dated + undated


def get_upcoming_events(events, today=None) -> List[dict]:
    return sort_by_date([e for e in events if is_upcoming(e, today)], ascending=True)


def get_past_events(events, today=None) -> List[dict]:
    return sort_by_date([e for e in events if not is_upcoming(e, today)], ascending=False)


# ===================
# FEED ADAPTER
# ===================

class EventSource:
    """
    Year-partitioned event feed.

    Configuration (set in Flask app.config):
        EVENTS_FEED_URL: URL template with a {year} placeholder
        EVENTS_START_YEAR: First year with a feed document (default: 2024)
        REQUEST_TIMEOUT: Seconds to wait for the feed
    """

    def __init__(self, app=None, feed_url=DEFAULT_FEED_URL, start_year=2024, timeout=30):
        self.feed_url = feed_url
        self.start_year = start_year
        self.timeout = timeout

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.feed_url = app.config.get('EVENTS_FEED_URL', self.feed_url)
        self.start_year = int(app.config.get('EVENTS_START_YEAR', self.start_year))
        self.timeout = app.config.get('REQUEST_TIMEOUT', self.timeout)

    def _get_feed(self, year):
        """Download and decode one year's document. Raises UpstreamFetchError."""
        url = self.feed_url.format(year=year)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamFetchError(f"Error fetching events for year {year}: {e}") from e

        if not response.ok:
            raise UpstreamFetchError(f"No events found for year {year} (HTTP {response.status_code})")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Malformed events document for year {year}: {e}") from e

        if not isinstance(data, list):
            raise UpstreamFetchError(f"Events document for year {year} is not a list")
        return data

    def fetch_events_for_year(self, year) -> List[dict]:
        """Events of one year, each tagged with that year. [] on any failure."""
        try:
            data = self._get_feed(year)
        except UpstreamFetchError as e:
            logger.warning(str(e))
            return []

        return [dict(event, year=year) for event in data if isinstance(event, dict)]

    def fetch_years(self, years) -> List[dict]:
        events = []
        for year in years:
            events.extend(self.fetch_events_for_year(year))
        return events

    def fetch_all_events(self, today=None) -> List[dict]:
        """Every event from the first feed year through next year"""
        current_year = (today or date.today()).year
        return self.fetch_years(range(self.start_year, current_year + 2))

    def list_upcoming(self, today=None) -> List[dict]:
        """Upcoming events of this year and next, soonest first"""
        today = today or date.today()
        events = self.fetch_years([today.year, today.year + 1])
        return get_upcoming_events(events, today)

    def next_upcoming(self, today=None) -> Optional[dict]:
        upcoming = self.list_upcoming(today)
        return upcoming[0] if upcoming else None

    def list_past(self, today=None) -> List[dict]:
        today = today or date.today()
        return get_past_events(self.fetch_all_events(today), today)
