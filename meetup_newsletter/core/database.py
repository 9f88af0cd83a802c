import os
import logging
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.engine import make_url

logger = logging.getLogger(__name__)

db = SQLAlchemy()


class Database:

    @staticmethod
    def ensure_sqlite_dir(database_uri):
        """
        Create the parent directory of a file-backed SQLite database.
        Other backends (and in-memory SQLite) are left alone.
        """
        url = make_url(database_uri)
        if not url.drivername.startswith('sqlite'):
            return None
        if not url.database or url.database == ':memory:':
            return None

        db_dir = os.path.dirname(os.path.abspath(url.database))
        os.makedirs(db_dir, exist_ok=True)
        return db_dir

    @staticmethod
    def init_db(app):
        """Create all tables for the registered models"""
        # Models must be imported so their tables are known to the metadata
        from meetup_newsletter.modules.subscribers import models  # noqa: F401
        from . import logging_service  # noqa: F401

        with app.app_context():
            try:
                db.create_all()
                logger.info("Newsletter database tables created/verified successfully")
            except Exception as e:
                logger.error(f"Error initializing newsletter database: {e}")
                raise
