"""
Loomline - Machinery Catalog for Flask
======================================

Storefront and admin back-office for an industrial-machinery catalog:
- Catalog browsing, search, filtering and sorting
- Admin product editing with image/video media on an external host
- Admin authentication

Usage:
    from flask import Flask
    from loomline import Loomline

    app = Flask(__name__)
    Loomline(app)
"""

__version__ = '0.1.0'

import logging

import click
from flask_cors import CORS

from .core.config import Config, CONFIG_KEYS

logger = logging.getLogger(__name__)

# Room for the text fields sent alongside an upload
FORM_OVERHEAD_BYTES = 1024 * 1024

# Public storefront paths that accept cross-origin requests
CATALOG_CORS_PATHS = (r"/api/products.*", r"/api/categories")


class Loomline:
    """Flask extension: applies config defaults, binds the database, registers blueprints."""

    def __init__(self, app=None, product_repository=None, media_host_factory=None):
        self.product_repository = product_repository
        self.media_host_factory = media_host_factory
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        # Host app values win over framework defaults. Flask pre-seeds some
        # keys (SECRET_KEY) with None, so None counts as unset.
        for key in CONFIG_KEYS:
            if app.config.get(key) is None:
                app.config[key] = getattr(Config, key)
        if app.config.get('MAX_CONTENT_LENGTH') is None:
            app.config['MAX_CONTENT_LENGTH'] = int(app.config['MAX_UPLOAD_BYTES']) + FORM_OVERHEAD_BYTES

        from .core.database import Database
        # Models must be imported before tables are created
        from .core import logging_service  # noqa: F401
        from .modules.auth import auth_bp
        from .modules.catalog import catalog_bp
        from .modules.catalog.repository import ProductRepository
        from .modules.products_admin import products_admin_bp

        Database.init_app(app)

        if self.product_repository is None:
            self.product_repository = ProductRepository()

        for blueprint in (catalog_bp, products_admin_bp, auth_bp):
            app.register_blueprint(blueprint)
            self._registered.append(blueprint.name)

        self._init_cors(app)
        self._register_commands(app)
        app.extensions['loomline'] = self
        logger.info(f"Loomline initialised with modules: {', '.join(self._registered)}")

    def get_registered_modules(self):
        return list(self._registered)

    def media_host(self):
        from .core.storage import get_media_host
        if self.media_host_factory is not None:
            return self.media_host_factory()
        return get_media_host()

    def product_writer(self):
        """A ProductWriter wired to this app's repository, media host and limits."""
        from .modules.products_admin.pipeline import ProductWriter, WriterSettings
        return ProductWriter(self.product_repository, self.media_host(), WriterSettings.from_config())

    @staticmethod
    def _init_cors(app):
        """Allow the configured origins on the public catalog API only."""
        origins = app.config['CORS_ORIGINS']
        if isinstance(origins, str):
            origins = [o.strip() for o in origins.split(',') if o.strip()]
        CORS(app, resources={path: {'origins': origins} for path in CATALOG_CORS_PATHS})

    @staticmethod
    def _register_commands(app):
        @app.cli.command('seed-catalog')
        def seed_catalog():
            """Load the sample machines into an empty catalog."""
            from .modules.catalog.sample_data import seed_sample_products
            inserted = seed_sample_products()
            print(f"Inserted {inserted} sample products")

        @app.cli.command('prune-logs')
        @click.option('--days', default=30, show_default=True, help='Keep entries newer than this.')
        def prune_logs(days):
            """Delete application log entries older than --days."""
            from .core.logging_service import LoggingService
            deleted = LoggingService.cleanup_old_logs(days)
            print(f"Deleted {deleted} log entries")


__all__ = ['Loomline', 'Config', '__version__']
