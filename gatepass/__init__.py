"""
Flask Application Factory
Initializes and configures the gate pass application
"""

import os
from flask import Flask, render_template, request, redirect, flash, jsonify
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect, CSRFError
from config import config
from gatepass.models import db

# Initialize extensions
migrate = Migrate()
csrf = CSRFProtect()


def create_app(config_name='default'):
    """
    Application factory pattern
    Creates and configures Flask application
    """
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Validate secret key in production
    if config_name == 'production':
        if not app.config.get('SECRET_KEY') or app.config['SECRET_KEY'] == 'dev-secret-key-change-in-production':
            raise ValueError("Production requires a secure SECRET_KEY. Set it via environment variable.")
        if len(app.config['SECRET_KEY']) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters for production.")

    if app.config.get('STORE_BACKEND') not in ('database', 'http'):
        raise ValueError(f"STORE_BACKEND must be 'database' or 'http', got {app.config.get('STORE_BACKEND')!r}")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    os.makedirs(app.config['LOG_FOLDER'], exist_ok=True)

    # Register blueprints
    from gatepass.routes.api import bp as api_bp
    csrf.exempt(api_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    from gatepass.routes.inventory import bp as inventory_bp
    app.register_blueprint(inventory_bp)

    from gatepass.routes.gatepasses import bp as gatepasses_bp
    app.register_blueprint(gatepasses_bp, url_prefix='/gatepasses')

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'NOT_FOUND', 'message': 'Resource not found'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        from gatepass.utils.error_logger import log_error
        db.session.rollback()
        log_error(getattr(error, 'original_exception', None) or error, status_code=500)
        if request.path.startswith('/api/'):
            return jsonify({'error': 'INTERNAL_ERROR', 'message': 'Internal server error'}), 500
        return render_template('errors/500.html'), 500

    # CSRF error handler - flash and send the user back to the form
    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        flash('Session expired. Please try again.', 'warning')
        return redirect(request.referrer or '/')

    # Context processors
    @app.context_processor
    def utility_processor():
        """Make utility functions available to all templates"""
        from gatepass.constants import PRODUCT_TYPES, TRANSPORT_MODES
        from gatepass.utils.helpers import format_datetime

        return dict(
            format_datetime=format_datetime,
            site_name=app.config.get('SITE_NAME', 'Vemagiri GIS'),
            organization_name=app.config.get('ORGANIZATION_NAME', ''),
            transport_modes=TRANSPORT_MODES,
            product_types=PRODUCT_TYPES
        )

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        csp = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
            "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
            "img-src 'self' data:; "
            "connect-src 'self'; "
            "frame-ancestors 'none'; "
            "form-action 'self';"
        )
        response.headers['Content-Security-Policy'] = csp

        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Referrer policy
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        return response

    return app
