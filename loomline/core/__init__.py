"""
Loomline Core
=============

Core utilities and shared functionality for Loomline modules.
"""

from .config import Config, get_config
from .database import Database, db
from .errors import (
    CatalogError, ValidationError, AuthenticationError, NotFoundError,
    ConflictError, ExternalServiceError, PersistenceError, Result,
)
from .logging_service import AppLog, LoggingService
from .storage import MediaKind, HostedMedia, MediaHost, CloudinaryMediaHost, LocalMediaHost, get_media_host

__all__ = [
    'Config', 'get_config', 'Database', 'db',
    'CatalogError', 'ValidationError', 'AuthenticationError', 'NotFoundError',
    'ConflictError', 'ExternalServiceError', 'PersistenceError', 'Result',
    'AppLog', 'LoggingService',
    'MediaKind', 'HostedMedia', 'MediaHost', 'CloudinaryMediaHost', 'LocalMediaHost', 'get_media_host',
]
