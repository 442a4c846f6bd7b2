"""
Product Repository
==================

The one place that talks to the products table. Query and write code receive
a repository instead of reaching for the session themselves, so tests can
hand them a fake.
"""

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ...core.database import db, Database
from ...core.errors import PersistenceError
from .models import Product


class ProductRepository:

    def get(self, product_id):
        """Product by id, or None."""
        if not product_id:
            return None
        try:
            return db.session.get(Product, product_id)
        except SQLAlchemyError as e:
            raise PersistenceError('Failed to fetch product') from e

    def list_newest(self):
        """All products, newest first."""
        try:
            return Product.query.order_by(Product.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise PersistenceError('Failed to fetch products') from e

    def upsert(self, product):
        """Insert or update a product in one commit."""
        try:
            product = db.session.merge(product)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError('Failed to save product') from e
        Database.commit()
        return product

    def delete(self, product):
        try:
            db.session.delete(product)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError('Failed to delete product') from e
        Database.commit()

    def category_counts(self):
        """[{name, count}] grouped by category, alphabetical."""
        try:
            rows = (
                db.session.query(Product.category, func.count(Product.id))
                .group_by(Product.category)
                .order_by(Product.category)
                .all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError('Failed to fetch categories') from e
        return [{'name': name, 'count': count} for name, count in rows]
