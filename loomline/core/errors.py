"""
Error Taxonomy
==============

Every catalog operation fails with one of these kinds. Operations convert them
into a Result at their boundary; HTTP handlers turn a Result into a JSON body
and a status code.
"""

from flask import jsonify


class CatalogError(Exception):
    """Base class for errors that map to a user-facing message and status."""
    kind = 'error'
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'success': False, 'error': self.message, 'kind': self.kind}


class ValidationError(CatalogError):
    kind = 'validation'
    status_code = 400
    default_message = 'Invalid request'


class AuthenticationError(CatalogError):
    kind = 'authentication'
    status_code = 401
    default_message = 'Authentication required'


class NotFoundError(CatalogError):
    kind = 'not_found'
    status_code = 404
    default_message = 'Product not found'


class ConflictError(CatalogError):
    kind = 'conflict'
    status_code = 409
    default_message = 'Resource already exists'


class ExternalServiceError(CatalogError):
    kind = 'external_service'
    status_code = 502
    default_message = 'Media host request failed'


class PersistenceError(CatalogError):
    kind = 'persistence'
    status_code = 500
    default_message = 'Database error'


class Result:
    """Outcome of a catalog operation: either a value or a CatalogError."""

    def __init__(self, ok, value=None, error=None):
        self.ok = ok
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value=None):
        return cls(True, value=value)

    @classmethod
    def failure(cls, error):
        return cls(False, error=error)

    @property
    def error_kind(self):
        return self.error.kind if self.error else None

    def __repr__(self):
        if self.ok:
            return f"Result(ok, {self.value!r})"
        return f"Result({self.error_kind}: {self.error.message})"

    def to_response(self, key=None, status=200):
        """Build a Flask (response, status) pair in the API's JSON shape."""
        if not self.ok:
            return jsonify(self.error.to_dict()), self.error.status_code
        body = {'success': True}
        if key:
            body[key] = self.value
        return jsonify(body), status


def handle_catalog_error(error):
    """Blueprint error handler for CatalogError raised inside a view."""
    return jsonify(error.to_dict()), error.status_code
