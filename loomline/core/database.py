import os
import logging
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

from .errors import PersistenceError

logger = logging.getLogger(__name__)

db = SQLAlchemy()


class Database:

    @staticmethod
    def init_app(app):
        """Bind the shared SQLAlchemy object to the app and create missing tables."""
        Database._ensure_sqlite_dir(app.config.get('SQLALCHEMY_DATABASE_URI', ''))
        db.init_app(app)
        with app.app_context():
            db.create_all()

    @staticmethod
    def _ensure_sqlite_dir(uri):
        """File-backed SQLite needs its directory before the first connect."""
        prefix = 'sqlite:///'
        if not uri.startswith(prefix):
            return
        path = uri[len(prefix):]
        if not path or path == ':memory:':
            return
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)

    @staticmethod
    def commit():
        """Commit the current session, rolling back and raising PersistenceError on failure."""
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database commit failed: {e}")
            raise PersistenceError('Database error') from e
