"""Routes package for the translation backend."""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


def register_routes(app):
    """Register all route blueprints with the application."""
    from .translations import translations_bp
    from .admin import admin_bp

    app.register_blueprint(translations_bp, url_prefix='/api/translations')
    app.register_blueprint(admin_bp, url_prefix='/api/admin/translations')

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception(f"Translations API error: {e}")
        return jsonify({'error': 'Server error'}), 500
