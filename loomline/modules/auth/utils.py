from functools import wraps
from flask import session, jsonify


def admin_required(f):
    """Decorator to require an admin session on JSON endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function
