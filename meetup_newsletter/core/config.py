import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """
    Base configuration for the newsletter service.
    Everything is read from environment variables (or a local .env file).
    """
    # Public site, used for CORS and for links inside emails
    SITE_URL = os.getenv('SITE_URL', 'http://localhost:4321')
    VERIFY_PATH = os.getenv('VERIFY_PATH', '/en/verify')
    UNSUBSCRIBE_PATH = os.getenv('UNSUBSCRIBE_PATH', '/en/unsubscribe')
    EVENTS_PATH = os.getenv('EVENTS_PATH', '/en/events')

    # Shared secret for /send-update and /stats
    ADMIN_KEY = os.getenv('ADMIN_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(DB_DIR, 'newsletter.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Resend API settings - leave RESEND_API_KEY unset for local development
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')
    EMAIL_FROM = os.getenv('EMAIL_FROM', 'Tech Moncton <noreply@monctontechhive.ca>')
    EMAIL_BRAND_NAME = os.getenv('EMAIL_BRAND_NAME', 'Tech Moncton')

    # Broadcast settings
    UPDATE_FALLBACK_LINK = os.getenv('UPDATE_FALLBACK_LINK')
    BROADCAST_MAX_WORKERS = int(os.getenv('BROADCAST_MAX_WORKERS', '4'))

    # Public event feed, one JSON document per year
    EVENTS_FEED_URL = os.getenv(
        'EVENTS_FEED_URL',
        'https://raw.githubusercontent.com/TechMoncton/Meetups/main/MeetUps%20{year}/MeetUps%20{year}.json'
    )
    # First year the feed has a document for
    EVENTS_START_YEAR = int(os.getenv('EVENTS_START_YEAR', '2024'))

    # Seconds, applied to every outbound HTTP call
    REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '30'))

    # Port for local server
    port = int(os.getenv('PORT', '5000'))
