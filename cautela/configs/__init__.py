#!/usr/bin/env python

"""
    Configurations for Cautela

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import os


# Determine environment
TESTING = os.getenv("TESTING", "false").lower() == "true"

# API server configuration
SCHEME = 'http'
HOST = os.environ.get('CAUTELA_HOST', 'localhost')
PORT = int(os.environ.get('CAUTELA_PORT', 8080))
WORKERS = int(os.environ.get('CAUTELA_WORKERS', 1))
DEBUG = bool(int(os.environ.get('CAUTELA_DEBUG', 0)))
LOG_LEVEL = os.environ.get('CAUTELA_LOG_LEVEL', 'info')
SSL_CRT = os.environ.get('CAUTELA_SSL_CRT')
SSL_KEY = os.environ.get('CAUTELA_SSL_KEY')

CORS_ORIGINS = [
    origin.strip() for origin in
    os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')
    if origin.strip()
]

# Signs session tokens; must be set in production
SEED = os.environ.get('CAUTELA_SEED', 'cautela-dev-seed')
SESSION_TTL = int(os.environ.get('SESSION_TTL', 604800))

DEFAULT_PAGE_SIZE = int(os.environ.get('DEFAULT_PAGE_SIZE', 10))

# Document templates (.docx)
TEMPLATES_DIR = os.environ.get(
    'CAUTELA_TEMPLATES_DIR',
    os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates')
)
READY_EXCLUDED_CATEGORIES = [
    name.strip() for name in
    os.environ.get('READY_EXCLUDED_CATEGORIES', 'Intendência').split(',')
    if name.strip()
]

OPTIONS = {
    'host': HOST,
    'port': PORT,
    'log_level': LOG_LEVEL,
    'reload': DEBUG,
    'workers': WORKERS,
}
if SSL_CRT and SSL_KEY:
    OPTIONS['ssl_keyfile'] = SSL_KEY
    OPTIONS['ssl_certfile'] = SSL_CRT
    SCHEME = 'https'

DB_CONFIG = {
    'user': os.environ.get('DB_USER', 'postgres'),
    'password': os.environ.get('DB_PASSWORD'),
    'host': os.environ.get('DB_HOST', 'localhost'),
    'port': int(os.environ.get('DB_PORT', '5432')),
    'dbname': os.environ.get('DB_NAME', 'cautela'),
}

# Database configuration
DB_URI = os.environ.get('CAUTELA_DB_URI') or (
    "sqlite:///:memory:" if TESTING else
    'postgresql+psycopg2://{user}:{password}@{host}:{port}/{dbname}'.format(**DB_CONFIG)
)

__all__ = [
    'SCHEME', 'HOST', 'PORT', 'DEBUG', 'OPTIONS', 'DB_URI', 'DB_CONFIG',
    'TESTING', 'SEED', 'SESSION_TTL', 'TEMPLATES_DIR', 'LOG_LEVEL',
    'READY_EXCLUDED_CATEGORIES', 'CORS_ORIGINS', 'DEFAULT_PAGE_SIZE',
]
