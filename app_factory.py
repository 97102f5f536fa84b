"""
Flask Application Factory for the BAC Index quiz

This module implements the Flask app factory pattern, allowing for different
configurations for development, testing, and production environments.
"""
import os
import secrets
import time
from datetime import timedelta
from flask import Flask, g, request, redirect, flash, url_for, jsonify
from flask_cors import CORS
from flask_wtf.csrf import CSRFError

# Import extensions
from extensions import csrf, limiter

from logging_config import get_logger, log_request
from template_helpers import format_diff, get_diff_class

logger = get_logger(__name__)


def create_app(config_name='development'):
    """
    Flask application factory.

    Args:
        config_name: One of 'development', 'testing', or 'production'

    Returns:
        Flask application instance
    """
    app = Flask(__name__)

    # Load configuration based on environment
    _configure_app(app, config_name)

    # Initialize extensions
    _init_extensions(app)

    # Register blueprints
    _register_blueprints(app)

    # Register middleware and handlers
    _register_middleware(app)
    _register_error_handlers(app)
    _register_context_processors(app)

    logger.info(f"App created ({config_name})")
    return app


def _configure_app(app, config_name):
    """Configure app based on environment."""
    is_dev_or_test = (
        config_name in ('development', 'testing') or
        os.environ.get('FLASK_DEBUG', '').lower() == 'true' or
        os.environ.get('TESTING', '').lower() == 'true'
    )

    # Secret key configuration
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY and not is_dev_or_test:
        raise RuntimeError('SECRET_KEY must be set in production')
    app.secret_key = SECRET_KEY or secrets.token_hex(32)

    # Debug mode
    if config_name == 'development':
        app.debug = os.environ.get('FLASK_DEBUG', 'true').lower() == 'true'
    elif config_name == 'testing':
        app.debug = False
        app.config['TESTING'] = True
        app.config['WTF_CSRF_ENABLED'] = False
        app.config['RATELIMIT_ENABLED'] = False
    else:  # production
        app.debug = False

    # The quiz is short - a session lasts two hours
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=2)
    app.config['SESSION_REFRESH_EACH_REQUEST'] = True

    # Security configuration
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # Result payloads are tiny
    app.config['SESSION_COOKIE_SECURE'] = not app.debug and config_name != 'testing'
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.json.ensure_ascii = False


def _init_extensions(app):
    """Initialize Flask extensions."""
    # Initialize CSRF protection
    csrf.init_app(app)

    # Initialize rate limiter
    limiter.init_app(app)

    # CORS Configuration for API endpoints
    CORS(app, resources={
        r"/api/*": {
            "origins": os.environ.get('CORS_ORIGINS', '*').split(','),
            "methods": ["POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })


def _register_blueprints(app):
    """Register all application blueprints."""
    from blueprints.quiz import quiz_bp
    from blueprints.api import api_bp

    app.register_blueprint(quiz_bp)
    app.register_blueprint(api_bp)


def _register_middleware(app):
    """Register middleware functions."""
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_and_secure(response):
        """Log the request and add security headers to all responses"""
        started = getattr(g, 'request_started', None)
        if started is not None:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            log_request(logger, request, response.status_code, duration_ms)

        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "script-src 'self' 'unsafe-inline'"
        )
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

        # Only add HSTS in production (not in debug mode)
        if not app.debug and not app.testing:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response


def _register_error_handlers(app):
    """Register error handlers."""
    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        logger.warning(f"CSRF error on {request.path}: {e.description}")
        flash('Your session expired. Please try again.', 'error')
        return redirect(request.referrer or url_for('quiz.index'))

    @app.errorhandler(429)
    def handle_rate_limit(e):
        if request.path.startswith('/api/'):
            return jsonify({'message': 'Too many requests'}), 429
        return e


def _register_context_processors(app):
    """Register context processors for templates."""
    @app.context_processor
    def inject_template_helpers():
        """Make the difference helpers available in all templates"""
        return {
            'format_diff': format_diff,
            'get_diff_class': get_diff_class,
        }
