"""
Catalog Module
==============

Public storefront API for the machinery catalog.

Provides:
- Product listing with search, category, stock and price filters
- Sorting (featured, newest, price, rating) and paging
- Featured, related and discounted product lists
- Category counts
"""

from flask import Blueprint

catalog_bp = Blueprint(
    'catalog',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['catalog_bp']
