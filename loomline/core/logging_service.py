"""
Centralized logging service for Loomline.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
from datetime import datetime, timedelta
from flask import request, has_request_context, session
from sqlalchemy.exc import SQLAlchemyError

from .database import db

logger_fallback = logging.getLogger(__name__)


class AppLog(db.Model):
    __tablename__ = 'app_logs'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    level = db.Column(db.String(16), nullable=False, index=True)
    source = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.Text, nullable=False)
    details = db.Column(db.Text)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(512))
    request_path = db.Column(db.String(512))
    user_id = db.Column(db.String(64))


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')
        return ip_address, user_agent, request.path

    @staticmethod
    def _current_user_id():
        if not has_request_context():
            return None
        admin_id = session.get('admin_id')
        return str(admin_id) if admin_id is not None else None

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (catalog, products_admin, auth, etc.)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        logger_fallback.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        ip_address, user_agent, request_path = LoggingService._get_request_context()
        if user_id is None:
            user_id = LoggingService._current_user_id()

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        # Written on its own connection so a failed product transaction
        # never takes its log entries down with it.
        try:
            with db.engine.begin() as conn:
                conn.execute(AppLog.__table__.insert().values(
                    timestamp=datetime.utcnow(),
                    level=level,
                    source=source,
                    message=message,
                    details=details,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    request_path=request_path,
                    user_id=user_id,
                ))
        except Exception as e:
            # Fallback to console logging if database fails
            logger_fallback.warning(f"Logging service error: {e}")
            if details:
                logger_fallback.warning(f"Details: {details}")

    @staticmethod
    def info(source, message, details=None, user_id=None):
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log user actions (sign-in, sign-up, product edits, etc.)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def recent(limit=100, level=None, source=None):
        """Most recent log entries, newest first."""
        query = AppLog.query
        if level:
            query = query.filter(AppLog.level == level.upper())
        if source:
            query = query.filter(AppLog.source == source)
        return query.order_by(AppLog.timestamp.desc(), AppLog.id.desc()).limit(limit).all()

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        cutoff = datetime.utcnow() - timedelta(days=days_to_keep)
        try:
            deleted_count = AppLog.query.filter(AppLog.timestamp < cutoff).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0

        LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
        return deleted_count

