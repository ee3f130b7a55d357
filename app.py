"""
app.py — Flask entry point for the quarterly tables application.

Initializes the Flask app, configures logging and CSRF protection,
calls init_db() for the server-side tables store,
registers the route blueprints and injects i18n strings into the
template context.

Run: python app.py → localhost:5000
"""

import os
import json
import logging
from flask import Flask
from flask_wtf.csrf import CSRFProtect

from database import init_db
from routes.main import main_bp
from routes.api import api_bp
from routes.export import export_bp


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get(
        'QUARTER_TABLES_SECRET_KEY', 'quarter-tables-local-app-secret-key'
    )
    app.config['WTF_CSRF_CHECK_DEFAULT'] = True
    app.config['TEMPLATES_AUTO_RELOAD'] = True
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')
    app.config['DATABASE'] = os.environ.get('QUARTER_TABLES_DATABASE')

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    csrf = CSRFProtect(app)

    # Initialize the server-side tables store
    with app.app_context():
        init_db()

    # Load i18n strings
    base_dir = os.path.dirname(os.path.abspath(__file__))
    i18n_path = os.path.join(base_dir, 'i18n', 'en.json')
    with open(i18n_path, 'r', encoding='utf-8') as f:
        i18n = json.load(f)
    app.config['I18N'] = i18n

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(export_bp)
    csrf.exempt(api_bp)

    @app.context_processor
    def inject_i18n():
        """Inject UI strings into all templates."""
        return {'i18n': i18n}

    app.logger.debug("Application created")
    return app


if __name__ == '__main__':
    app = create_app()
    # Debug mode: enabled by default for development (auto-reload on file changes)
    # Set FLASK_DEBUG=0 to disable for production
    debug = os.environ.get('FLASK_DEBUG', '1') != '0'
    app.run(host='localhost', port=5000, debug=debug)
