"""
Meetup Newsletter
=================

Double opt-in newsletter for a community meetup site:
- POST /subscribe, GET /verify, GET /unsubscribe (subscription lifecycle)
- POST /send-update (admin broadcast of the next upcoming event)
- GET /events (event listing for the site front-end)

Usage:
    from meetup_newsletter import create_app

    app = create_app()

Or, with an existing Flask app:
    from meetup_newsletter import Newsletter

    newsletter = Newsletter(app)
"""

import logging

import click
from flask import Flask
from flask_cors import CORS

from .core.config import Config
from .core.database import Database, db
from .modules.broadcast import BroadcastDispatcher, broadcast_bp
from .modules.email import EmailService
from .modules.events import EventSource, events_bp
from .modules.subscribers import subscribers_bp

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type', 'x-admin-key']

BLUEPRINTS = [
    ('subscribers', subscribers_bp),
    ('events', events_bp),
    ('broadcast', broadcast_bp),
]


class Newsletter:
    """
    Flask extension wiring the newsletter modules into an app.

    Reads all settings from app.config, falling back to Config for anything
    the app does not set. Stores itself in app.extensions['newsletter'] so
    routes can reach the shared services.
    """

    def __init__(self, app=None):
        self.email_service = EmailService()
        self.event_source = EventSource()
        self.dispatcher = None
        self._registered = []

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_defaults(app)
        self._setup_database(app)

        self.email_service.init_app(app)
        self.event_source.init_app(app)
        self.dispatcher = BroadcastDispatcher(
            self.email_service,
            self.event_source,
            fallback_link=app.config.get('UPDATE_FALLBACK_LINK'),
            max_workers=app.config.get('BROADCAST_MAX_WORKERS', 4),
        )

        self._setup_cors(app)
        self._register_blueprints(app)
        self._register_commands(app)

        app.extensions['newsletter'] = self

    def get_registered_modules(self):
        return list(self._registered)

    def _apply_defaults(self, app):
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))

    def _setup_database(self, app):
        Database.ensure_sqlite_dir(app.config['SQLALCHEMY_DATABASE_URI'])
        db.init_app(app)
        Database.init_db(app)

    def _setup_cors(self, app):
        site_url = app.config.get('SITE_URL', '').rstrip('/')
        CORS(
            app,
            origins=[site_url],
            allow_headers=CORS_ALLOW_HEADERS,
            methods=['GET', 'POST', 'OPTIONS'],
        )
        logger.info(f"CORS enabled for origin: {site_url}")

    def _register_blueprints(self, app):
        for name, blueprint in BLUEPRINTS:
            app.register_blueprint(blueprint)
            self._registered.append(name)

    def _register_commands(self, app):
        @app.cli.command('init-db')
        def init_db_command():
            """Create the newsletter tables."""
            Database.init_db(app)
            click.echo('Newsletter database initialized.')


def create_app(config=None):
    """Application factory: Config from the environment, then overrides"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    Newsletter(app)
    return app


__all__ = ['Newsletter', 'create_app', 'Config', 'db']
