"""Shared authentication utilities.

The translation API does not manage users. Admin endpoints only check a
signed JWT carrying ``role: admin``, issued by whatever service owns
accounts and signed with the shared JWT_SECRET_KEY.
"""

from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app, g
import jwt

ADMIN_ROLE = 'admin'


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def generate_token(user_id, role=ADMIN_ROLE, expires_in=timedelta(hours=1)):
    """Issue a signed token for ``user_id`` with ``role``."""
    payload = {
        'user_id': user_id,
        'role': role,
        'exp': datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, _get_secret_key(), algorithm='HS256')


def admin_required(f):
    """
    Decorator to require a valid JWT token with the admin role.

    Sets g.current_user_id for the decorated view.

    Usage:
        @bp.route('/protected', methods=['POST'])
        @admin_required
        def protected_route():
            return jsonify({'user_id': g.current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401

        try:
            # Support both "Bearer <token>" and raw token formats
            token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
            payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except jwt.InvalidTokenError:
            return jsonify({'error': 'Token is invalid'}), 401

        if payload.get('role') != ADMIN_ROLE:
            return jsonify({'error': 'Admin access required'}), 403

        g.current_user_id = payload.get('user_id')
        return f(*args, **kwargs)
    return decorated
