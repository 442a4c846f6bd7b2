"""
Catalog Routes
==============

Storefront JSON API. Every listing loads the catalog newest-first from the
repository and runs it through the query pipeline.
"""

from flask import jsonify, request, current_app

from ...core.errors import CatalogError, ValidationError, NotFoundError, handle_catalog_error
from . import catalog_bp
from .query import (
    CatalogQuery, query_products, paginate, featured_products,
    related_products, deal_products,
)

catalog_bp.register_error_handler(CatalogError, handle_catalog_error)


def _repository():
    return current_app.extensions['loomline'].product_repository


@catalog_bp.route('/products', methods=['GET'])
def list_products():
    """
    Filtered, sorted product listing.

    Query params:
        q: search text (name or description)
        category: category name, repeatable or comma separated
        min_price / max_price: inclusive price range
        in_stock: "true" to hide out-of-stock machines
        sort: featured | newest | price-low | price-high | rating
        page / per_page: paging (per_page omitted = everything)
    """
    query = CatalogQuery.from_args(request.args)
    products = _repository().list_newest()
    matched = query_products(products, query)
    page = paginate(matched, query.page, query.per_page)

    return jsonify({
        'success': True,
        'products': [p.to_dict() for p in page.items],
        'count': len(page.items),
        'totalProducts': len(products),
        'pagination': page.meta(),
    })


@catalog_bp.route('/products/featured', methods=['GET'])
def get_featured_products():
    limit = current_app.config.get('FEATURED_LIMIT', 8)
    products = featured_products(_repository().list_newest(), limit)
    return jsonify({'success': True, 'products': [p.to_dict() for p in products]})


@catalog_bp.route('/products/related', methods=['GET'])
def get_related_products():
    exclude_id = request.args.get('excludeId')
    if not exclude_id:
        raise ValidationError('excludeId is required')

    category = request.args.get('category') or None
    limit = current_app.config.get('RELATED_LIMIT', 4)
    products = related_products(_repository().list_newest(), exclude_id, limit, category=category)
    return jsonify({'success': True, 'products': [p.to_dict() for p in products]})


@catalog_bp.route('/products/deals', methods=['GET'])
def get_deals():
    products = deal_products(_repository().list_newest())
    return jsonify({'success': True, 'products': [p.to_dict() for p in products]})


@catalog_bp.route('/products/<product_id>', methods=['GET'])
def get_product(product_id):
    product = _repository().get(product_id)
    if not product:
        raise NotFoundError('Product not found')
    return jsonify({'success': True, 'product': product.to_dict()})


@catalog_bp.route('/categories', methods=['GET'])
def get_categories():
    categories = _repository().category_counts()
    return jsonify({'success': True, 'categories': categories})
