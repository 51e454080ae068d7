from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()


def create_app(config_name=None):
    app = Flask(__name__)

    # Config
    from polyglot.config import get_config
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    # Initialize extensions
    db.init_app(app)
    CORS(app)

    from polyglot import models  # noqa: F401  (register tables)

    with app.app_context():
        if app.config.get('AUTO_CREATE_TABLES'):
            try:
                db.create_all()
            except Exception as e:
                app.logger.warning(f"Could not create database tables: {e}")

    # Translation subsystem (cache, provider, store, resolver, backfill)
    from polyglot.services import init_translation_manager
    init_translation_manager(app)

    # Register routes
    from polyglot.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'}), 200

    return app
