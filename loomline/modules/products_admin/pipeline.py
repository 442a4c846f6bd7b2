"""
Product Write Pipeline
======================

Validate -> upload new media -> persist -> clean up old media.

ProductWriter is handed its repository and media host, so the same code runs
behind the admin API and in tests with fakes. Every public operation returns
a Result; nothing is written to the store or the media host before the
payload has passed validation.
"""

import json
import math
import uuid
import logging

from ...core.config import get_config, parse_bool
from ...core.errors import CatalogError, ValidationError, NotFoundError, PersistenceError, Result
from ...core.logging_service import LoggingService
from ...core.storage import MediaKind
from ..catalog.models import Product, new_product_id
from ..catalog.query import parse_price
from .media import validate_upload, DEFAULT_MAX_BYTES, DEFAULT_MAX_VIDEO_SECONDS

logger = logging.getLogger(__name__)

LOG_SOURCE = 'products_admin'


def derive_discount(price, original_price, supplied=0):
    """Percent off original_price, rounded half up; the supplied value when there is no markdown."""
    current = parse_price(price) if price else None
    original = parse_price(original_price) if original_price else None
    if current is not None and original is not None and original > current:
        return int(math.floor(100 * (original - current) / original + 0.5))
    return supplied


def _clean_text(value):
    return (value or '').strip()


def _optional_text(value):
    value = _clean_text(value)
    return value or None


def _lenient_int(value, default=0):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _lenient_float(value, default=0.0):
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _json_field(value, expected, name):
    if value is None or value == '':
        return expected()
    if isinstance(value, expected):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be valid JSON')
    if not isinstance(parsed, expected):
        raise ValidationError(f'{name} has the wrong shape')
    return parsed


class ProductPayload:
    """Admin create/update request, before normalization."""

    def __init__(self, name='', description='', category='', price=None, original_price=None,
                 media_url=None, media_asset_id=None, media_kind=None, features=None,
                 specifications=None, featured=False, in_stock=True, discount=0,
                 rating=0.0, reviews=0):
        self.name = name
        self.description = description
        self.category = category
        self.price = price
        self.original_price = original_price
        self.media_url = media_url
        self.media_asset_id = media_asset_id
        self.media_kind = media_kind
        self.features = features or []
        self.specifications = specifications or {}
        self.featured = featured
        self.in_stock = in_stock
        self.discount = discount
        self.rating = rating
        self.reviews = reviews

    @classmethod
    def from_form(cls, form):
        """Parse the admin form; features and specifications arrive as JSON strings."""
        features = _json_field(form.get('features'), list, 'features')
        specifications = _json_field(form.get('specifications'), dict, 'specifications')

        return cls(
            name=form.get('name', ''),
            description=form.get('description', ''),
            category=form.get('category', ''),
            price=form.get('price'),
            original_price=form.get('originalPrice'),
            media_url=form.get('image') or form.get('imageUrl'),
            media_asset_id=form.get('mediaAssetId') or form.get('cloudinaryPublicId'),
            media_kind=MediaKind.from_value(form.get('mediaType')),
            features=features,
            specifications=specifications,
            featured=str(form.get('featured', '')).lower() == 'true',
            in_stock=str(form.get('inStock', 'true')).lower() == 'true',
            discount=_lenient_int(form.get('discount')),
            rating=_lenient_float(form.get('rating')),
            reviews=_lenient_int(form.get('reviews')),
        )

    def normalized(self):
        """Trimmed strings, blank features/specifications dropped, derived discount."""
        price = _optional_text(self.price)
        original_price = _optional_text(self.original_price)
        features = [str(f).strip() for f in self.features if str(f).strip()]
        specifications = {
            str(key).strip(): str(value).strip()
            for key, value in self.specifications.items()
            if str(key).strip() and value is not None and str(value).strip()
        }
        supplied_discount = min(max(_lenient_int(self.discount), 0), 100)

        return {
            'name': _clean_text(self.name),
            'description': _clean_text(self.description),
            'category': _clean_text(self.category),
            'price': price,
            'original_price': original_price,
            'features': features,
            'specifications': specifications,
            'featured': bool(self.featured),
            'in_stock': bool(self.in_stock),
            'discount': derive_discount(price, original_price, supplied_discount),
            'rating': min(max(_lenient_float(self.rating), 0.0), 5.0),
            'reviews': max(_lenient_int(self.reviews), 0),
        }


class WriterSettings:
    def __init__(self, max_bytes=DEFAULT_MAX_BYTES, max_video_seconds=DEFAULT_MAX_VIDEO_SECONDS,
                 media_required_on_create=False):
        self.max_bytes = max_bytes
        self.max_video_seconds = max_video_seconds
        self.media_required_on_create = media_required_on_create

    @classmethod
    def from_config(cls):
        return cls(
            max_bytes=int(get_config('MAX_UPLOAD_BYTES', DEFAULT_MAX_BYTES)),
            max_video_seconds=float(get_config('MAX_VIDEO_SECONDS', DEFAULT_MAX_VIDEO_SECONDS)),
            media_required_on_create=parse_bool(get_config('MEDIA_REQUIRED_ON_CREATE'), False),
        )


class ProductWriter:

    def __init__(self, repository, media_host, settings=None):
        self.repository = repository
        self.media_host = media_host
        self.settings = settings or WriterSettings()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, payload, upload=None):
        """Validate and store a new product. Returns Result(Product)."""
        try:
            kind = self._validate(payload, upload, creating=True)
            product = Product(id=new_product_id(), **payload.normalized())

            hosted = None
            if upload is not None:
                hosted = self._upload(upload, kind, payload.media_asset_id)
                self._adopt_hosted(product, hosted)
            else:
                self._adopt_url(product, payload)

            product = self._persist(product, hosted)
        except CatalogError as e:
            return Result.failure(e)

        LoggingService.log_user_action(LOG_SOURCE, 'product created', details={
            'product_id': product.id, 'name': product.name,
        })
        return Result.success(product)

    def update(self, product_id, payload, upload=None):
        """Replace a product's mutable fields, swapping media if a file is supplied."""
        try:
            kind = self._validate(payload, upload, creating=False)

            product = self.repository.get(product_id)
            if product is None:
                raise NotFoundError('Product not found')

            old_asset_id = product.media_asset_id
            old_kind = product.kind or MediaKind.IMAGE

            hosted = None
            if upload is not None:
                hosted = self._upload(upload, kind, payload.media_asset_id)

            for field, value in payload.normalized().items():
                setattr(product, field, value)

            if hosted is not None:
                self._adopt_hosted(product, hosted)
            elif _optional_text(payload.media_url) and payload.media_url.strip() != product.media_url:
                self._adopt_url(product, payload)

            product = self._persist(product, hosted)
        except CatalogError as e:
            return Result.failure(e)

        if hosted is not None and old_asset_id and old_asset_id != hosted.asset_id:
            self._cleanup(old_asset_id, old_kind, product.id)

        LoggingService.log_user_action(LOG_SOURCE, 'product updated', details={
            'product_id': product.id, 'media_replaced': hosted is not None,
        })
        return Result.success(product)

    def delete(self, product_id):
        """Remove a product permanently, then its hosted media."""
        try:
            product = self.repository.get(product_id)
            if product is None:
                raise NotFoundError('Product not found')

            asset_id = product.media_asset_id
            kind = product.kind or MediaKind.IMAGE
            self.repository.delete(product)
        except CatalogError as e:
            return Result.failure(e)

        if asset_id:
            self._cleanup(asset_id, kind, product_id)

        LoggingService.log_user_action(LOG_SOURCE, 'product deleted', details={'product_id': product_id})
        return Result.success(product_id)

    def delete_media(self, asset_id, kind=MediaKind.IMAGE):
        """Delete one hosted asset by id. Host failures are reported, not swallowed."""
        try:
            if not _optional_text(asset_id):
                raise ValidationError('Asset id is required')
            self.media_host.delete(asset_id.strip(), kind)
        except CatalogError as e:
            return Result.failure(e)
        return Result.success(asset_id.strip())

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _validate(self, payload, upload, creating):
        if not all([_clean_text(payload.name), _clean_text(payload.description), _clean_text(payload.category)]):
            raise ValidationError('required fields missing')

        if creating and self.settings.media_required_on_create:
            if upload is None and not _optional_text(payload.media_url):
                raise ValidationError('media required')

        if upload is None:
            return None
        return validate_upload(upload, self.settings.max_bytes, self.settings.max_video_seconds)

    def _upload(self, upload, kind, desired_id=None):
        desired_id = _optional_text(desired_id) or f"product_{uuid.uuid4()}"
        return self.media_host.upload(upload.data, desired_id, kind, content_type=upload.content_type)

    @staticmethod
    def _adopt_hosted(product, hosted):
        product.media_url = hosted.url
        product.media_asset_id = hosted.asset_id
        product.media_kind = hosted.kind.value

    @staticmethod
    def _adopt_url(product, payload):
        url = _optional_text(payload.media_url)
        product.media_url = url
        product.media_asset_id = _optional_text(payload.media_asset_id) if url else None
        if url:
            product.media_kind = (payload.media_kind or product.kind or MediaKind.IMAGE).value
        else:
            product.media_kind = None

    def _persist(self, product, hosted):
        try:
            return self.repository.upsert(product)
        except PersistenceError:
            if hosted is not None:
                LoggingService.error(LOG_SOURCE, 'Uploaded media orphaned by failed save', {
                    'product_id': product.id, 'asset_id': hosted.asset_id,
                })
            raise

    def _cleanup(self, asset_id, kind, product_id):
        """Best-effort delete of media no product points at any more."""
        try:
            self.media_host.delete(asset_id, kind)
        except CatalogError as e:
            LoggingService.warning(LOG_SOURCE, 'Old media cleanup failed', {
                'product_id': product_id, 'asset_id': asset_id, 'error': e.message,
            })
