"""
Products Admin Module
=====================

Admin interface for the machinery catalog.

Provides:
- Product creation and editing
- Image/video upload to the media host, replacing old media
- Product deletion (with its hosted media)
- Admin product list with search and category filter
"""

from flask import Blueprint

products_admin_bp = Blueprint(
    'products_admin',
    __name__,
    url_prefix='/admin/products'
)

from . import routes

__all__ = ['products_admin_bp']
