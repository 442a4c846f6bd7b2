"""
Catalog Query Pipeline
======================

Filtering, sorting and paging over an in-memory list of products. Used by the
storefront listing and the admin product list alike. Nothing here touches the
database or mutates its input.
"""

import math
import re
from datetime import datetime
from typing import Iterable, List, Optional

from ...core.config import parse_bool
from ...core.errors import ValidationError

SORT_KEYS = ('featured', 'newest', 'price-low', 'price-high', 'rating')
DEFAULT_SORT = 'featured'

_NON_NUMERIC = re.compile(r'[^0-9.]')


def parse_price(value) -> Optional[float]:
    """Numeric value of a price string like "$45,000", or None if there is none."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = _NON_NUMERIC.sub('', str(value))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        # e.g. "1.2.3" after stripping
        return None


class CatalogQuery:
    """Filter/sort/page request for the catalog."""

    def __init__(self, search_text='', categories=None, price_min=None, price_max=None,
                 in_stock_only=False, sort_key=DEFAULT_SORT, page=1, per_page=None):
        self.search_text = (search_text or '').strip()
        self.categories = set(categories or ())
        self.price_min = price_min
        self.price_max = price_max
        self.in_stock_only = bool(in_stock_only)
        self.sort_key = sort_key if sort_key in SORT_KEYS else DEFAULT_SORT
        self.page = page
        self.per_page = per_page

    @classmethod
    def from_args(cls, args):
        """Build a query from request.args (or any mapping with getlist)."""
        categories = []
        for raw in args.getlist('category'):
            categories.extend(c.strip() for c in raw.split(',') if c.strip())

        return cls(
            search_text=args.get('q', ''),
            categories=categories,
            price_min=_float_arg(args, 'min_price'),
            price_max=_float_arg(args, 'max_price'),
            in_stock_only=parse_bool(args.get('in_stock'), False),
            sort_key=args.get('sort', DEFAULT_SORT),
            page=_int_arg(args, 'page', 1),
            per_page=_int_arg(args, 'per_page', None),
        )

    def matches(self, product) -> bool:
        if self.search_text:
            needle = self.search_text.lower()
            name = (product.name or '').lower()
            description = (product.description or '').lower()
            if needle not in name and needle not in description:
                return False

        if self.categories and product.category not in self.categories:
            return False

        if self.in_stock_only and not product.in_stock:
            return False

        # Products without a usable price are never excluded by the range
        price = parse_price(product.price) if product.price else None
        if price is not None:
            if self.price_min is not None and price < self.price_min:
                return False
            if self.price_max is not None and price > self.price_max:
                return False

        return True


def _float_arg(args, name):
    raw = args.get(name)
    if raw in (None, ''):
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f'{name} must be a number')
    if not math.isfinite(value):
        raise ValidationError(f'{name} must be a finite number')
    return value


def _int_arg(args, name, default):
    raw = args.get(name)
    if raw in (None, ''):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f'{name} must be an integer')


def _sort_price(product):
    return parse_price(product.price) or 0


def sort_products(products, sort_key=DEFAULT_SORT) -> list:
    """Return a new list ordered by sort_key. Python's sort is stable, so ties keep input order."""
    items = list(products)
    if sort_key == 'price-low':
        items.sort(key=_sort_price)
    elif sort_key == 'price-high':
        items.sort(key=_sort_price, reverse=True)
    elif sort_key == 'rating':
        items.sort(key=lambda p: p.rating or 0, reverse=True)
    elif sort_key == 'newest':
        items.sort(key=lambda p: p.created_at or datetime.min, reverse=True)
    else:
        items.sort(key=lambda p: 0 if p.featured else 1)
    return items


def query_products(products: Iterable, query: CatalogQuery) -> list:
    """Every product matching all of the query's predicates, in sort order."""
    return sort_products([p for p in products if query.matches(p)], query.sort_key)


class Page:
    def __init__(self, items, page, per_page, total):
        self.items = items
        self.page = page
        self.per_page = per_page
        self.total = total

    @property
    def pages(self):
        if not self.per_page:
            return 1
        return max(1, math.ceil(self.total / self.per_page))

    def meta(self):
        return {
            'page': self.page,
            'perPage': self.per_page,
            'total': self.total,
            'pages': self.pages,
        }


def paginate(items: List, page=1, per_page=None) -> Page:
    """Slice one 1-based page out of items; per_page None returns everything."""
    if page < 1:
        raise ValidationError('page must be 1 or greater')
    if per_page is None:
        return Page(list(items), 1, None, len(items))
    if per_page < 1:
        raise ValidationError('per_page must be 1 or greater')
    start = (page - 1) * per_page
    return Page(list(items[start:start + per_page]), page, per_page, len(items))


def group_by_category(products) -> List[dict]:
    """[{name, count}] in order of first appearance."""
    counts = {}
    for product in products:
        counts[product.category] = counts.get(product.category, 0) + 1
    return [{'name': name, 'count': count} for name, count in counts.items()]


def featured_products(products, limit=8) -> list:
    """Featured products, newest first."""
    featured = [p for p in products if p.featured]
    return sort_products(featured, 'newest')[:limit]


def related_products(products, product_id, limit=4, category=None) -> list:
    """Products from the same category first, topped up with others; never the product itself."""
    products = list(products)
    if category is None:
        current = next((p for p in products if p.id == product_id), None)
        category = current.category if current else None

    others = [p for p in products if p.id != product_id]
    if category is None:
        return others[:limit]

    same = [p for p in others if p.category == category]
    if len(same) >= limit:
        return same[:limit]
    rest = [p for p in others if p.category != category]
    return (same + rest)[:limit]


def deal_products(products) -> list:
    return [p for p in products if (p.discount or 0) > 0]
