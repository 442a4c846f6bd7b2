from flask import request, session, jsonify

from ...core.errors import CatalogError, Result, handle_catalog_error
from ...core.logging_service import LoggingService
from . import auth_bp
from .database import CredentialStore

auth_bp.register_error_handler(CatalogError, handle_catalog_error)


def _json_body():
    return request.get_json(silent=True) or request.form


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Create an admin account"""
    data = _json_body()
    try:
        user = CredentialStore.register(data.get('name'), data.get('email'), data.get('password'))
    except CatalogError as e:
        return Result.failure(e).to_response()

    LoggingService.log_user_action('auth', 'signup', user_id=str(user.id))
    return jsonify({'success': True, 'user': user.to_dict()}), 201


@auth_bp.route('/signin', methods=['POST'])
def signin():
    """Check credentials and open an admin session"""
    data = _json_body()
    email = (data.get('email') or '').strip().lower()
    try:
        user = CredentialStore.authenticate(email, data.get('password'))
    except CatalogError as e:
        LoggingService.log_security_event('Failed sign-in', {'email': email, 'reason': e.kind})
        return Result.failure(e).to_response()

    session.clear()
    session['admin_id'] = user.id
    session['admin_email'] = user.email
    LoggingService.log_user_action('auth', 'signin', user_id=str(user.id))
    return jsonify({'success': True, 'user': user.to_dict()})


@auth_bp.route('/signout', methods=['POST'])
def signout():
    session.pop('admin_id', None)
    session.pop('admin_email', None)
    return jsonify({'success': True})


@auth_bp.route('/me', methods=['GET'])
def current_user():
    """Currently signed-in admin, if any"""
    user = CredentialStore.get_user_by_id(session.get('admin_id'))
    if not user:
        return jsonify({'success': False, 'error': 'Authentication required'}), 401
    return jsonify({'success': True, 'user': user.to_dict()})
