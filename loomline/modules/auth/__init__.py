"""
Loomline Auth Module

Provides admin authentication:
- Email/password sign-up with salted password hashes
- Sign-in / sign-out backed by the Flask session
- admin_required guard for admin endpoints
"""

from flask import Blueprint

auth_bp = Blueprint(
    'auth',
    __name__,
    url_prefix='/api/auth'
)

from . import routes
from .database import CredentialStore
from .utils import admin_required

__all__ = ['auth_bp', 'CredentialStore', 'admin_required']
