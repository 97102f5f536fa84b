"""
BAC Index quiz - WSGI entry point

This module uses the Flask app factory pattern (see app_factory.py).
Run locally with `python app.py`, or point gunicorn at `app:app`.
"""
import os
from app_factory import create_app

# Determine environment and create app instance
if os.environ.get('FLASK_ENV', '').lower() == 'production':
    app = create_app('production')
elif os.environ.get('TESTING', '').lower() == 'true':
    app = create_app('testing')
else:
    app = create_app('development')


if __name__ == '__main__':
    app.run(debug=app.debug, port=int(os.environ.get('PORT', 5000)))
