"""
Catalog Models
==============

Product table. Categories are derived from products, never stored.
"""

import uuid
from datetime import datetime

from ...core.database import db
from ...core.storage import MediaKind

# Spec sheet keys offered by the admin form, in display order
SPECIFICATION_KEYS = ['Dimensions', 'Weight', 'Power', 'Capacity', 'Material/Speed', 'Warranty']


def new_product_id():
    return uuid.uuid4().hex


class Product(db.Model):
    __tablename__ = 'products'

    id = db.Column(db.String(32), primary_key=True, default=new_product_id)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(128), nullable=False, index=True)
    price = db.Column(db.String(64), nullable=True)
    original_price = db.Column(db.String(64), nullable=True)
    media_kind = db.Column(db.String(16), nullable=True)
    media_url = db.Column(db.String(1024), nullable=True)
    media_asset_id = db.Column(db.String(255), nullable=True)
    features = db.Column(db.JSON, nullable=False, default=list)
    specifications = db.Column(db.JSON, nullable=False, default=dict)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    in_stock = db.Column(db.Boolean, nullable=False, default=True)
    discount = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Float, nullable=False, default=0.0)
    reviews = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    @property
    def kind(self):
        return MediaKind.from_value(self.media_kind)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'price': self.price,
            'originalPrice': self.original_price,
            'imageUrl': self.media_url,
            'mediaType': self.media_kind,
            'mediaAssetId': self.media_asset_id,
            'features': list(self.features or []),
            'specifications': dict(self.specifications or {}),
            'featured': bool(self.featured),
            'inStock': bool(self.in_stock),
            'discount': self.discount or 0,
            'rating': self.rating or 0.0,
            'reviews': self.reviews or 0,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Product {self.id} {self.name!r}>"
