"""
WSGI entry point for production servers

    gunicorn wsgi:application

SECRET_KEY, DATABASE_URL and the STORE_BACKEND settings are read from the
environment or a .env file next to config.py.
"""

import os

from gatepass import create_app

application = create_app(os.environ.get('FLASK_ENV', 'production'))
