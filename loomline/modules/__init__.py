"""
Loomline Modules
================

Flask blueprint modules for the catalog storefront and admin.
"""

__all__ = ['auth', 'catalog', 'products_admin']
