"""
Newsletter Core
===============

Shared configuration, database handle, error taxonomy and logging.
"""

from .config import Config
from .database import Database, db
from .logging_service import AppLog, db_log

__all__ = ['Config', 'Database', 'db', 'AppLog', 'db_log']
