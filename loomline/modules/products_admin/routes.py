"""
Products Admin Routes
=====================

Multipart form endpoints for adding, editing and deleting catalog products.
All routes require an admin session.
"""

from flask import request, jsonify, current_app
from werkzeug.exceptions import RequestEntityTooLarge

from ...core.errors import CatalogError, ValidationError, NotFoundError, handle_catalog_error
from ...core.storage import MediaKind
from ..auth.utils import admin_required
from ..catalog.query import CatalogQuery, query_products, paginate
from . import products_admin_bp
from .media import MediaUpload
from .pipeline import ProductPayload

products_admin_bp.register_error_handler(CatalogError, handle_catalog_error)


@products_admin_bp.errorhandler(RequestEntityTooLarge)
def request_too_large(error):
    """Body over MAX_CONTENT_LENGTH; rejected before the upload is read."""
    return jsonify({'success': False, 'error': 'media too large', 'kind': 'validation'}), 413


UPLOAD_FIELDS = ('mediaFile', 'imageFile', 'videoFile')


def _extension():
    return current_app.extensions['loomline']


def _upload_from_request():
    """First non-empty file part of the form, or None."""
    for field in UPLOAD_FIELDS:
        file_storage = request.files.get(field)
        if file_storage and file_storage.filename:
            duration = request.form.get('videoDuration')
            try:
                reported = float(duration) if duration else None
            except ValueError:
                raise ValidationError('videoDuration must be a number')
            return MediaUpload.from_file_storage(file_storage, reported_duration=reported)
    return None


@products_admin_bp.route('', methods=['GET'])
@admin_required
def list_products():
    """Admin product list. Same query params as the storefront listing; category=all means no filter."""
    args = request.args.copy()
    if args.get('category') == 'all':
        args.pop('category')
    query = CatalogQuery.from_args(args)
    if 'sort' not in args:
        query.sort_key = 'newest'

    products = _extension().product_repository.list_newest()
    page = paginate(query_products(products, query), query.page, query.per_page)
    return jsonify({
        'success': True,
        'products': [p.to_dict() for p in page.items],
        'pagination': page.meta(),
    })


@products_admin_bp.route('/<product_id>', methods=['GET'])
@admin_required
def get_product(product_id):
    product = _extension().product_repository.get(product_id)
    if not product:
        raise NotFoundError('Product not found')
    return jsonify({'success': True, 'product': product.to_dict()})


@products_admin_bp.route('/add', methods=['POST'])
@admin_required
def add_product():
    """Create a product from the admin form"""
    payload = ProductPayload.from_form(request.form)
    upload = _upload_from_request()

    result = _extension().product_writer().create(payload, upload)
    if not result.ok:
        return result.to_response()
    return jsonify({'success': True, 'product': result.value.to_dict()}), 201


@products_admin_bp.route('/<product_id>', methods=['PUT', 'POST'])
@admin_required
def update_product(product_id):
    """Replace a product's fields; a new file swaps its media"""
    payload = ProductPayload.from_form(request.form)
    upload = _upload_from_request()

    result = _extension().product_writer().update(product_id, payload, upload)
    if not result.ok:
        return result.to_response()
    response = jsonify({'success': True, 'product': result.value.to_dict()})
    response.headers['Cache-Control'] = 'no-store'
    return response


@products_admin_bp.route('/<product_id>', methods=['DELETE'])
@products_admin_bp.route('/<product_id>/delete', methods=['POST'])
@admin_required
def delete_product(product_id):
    """Delete product and its hosted media"""
    result = _extension().product_writer().delete(product_id)
    if not result.ok:
        return result.to_response()
    return jsonify({'success': True, 'message': 'Product deleted successfully'})


@products_admin_bp.route('/delete-media', methods=['POST'])
@admin_required
def delete_media():
    """Delete a single hosted asset by id"""
    data = request.get_json(silent=True) or {}
    asset_id = data.get('assetId') or data.get('publicId')
    kind = MediaKind.from_value(data.get('mediaType')) or MediaKind.IMAGE

    result = _extension().product_writer().delete_media(asset_id, kind)
    return result.to_response()
