"""
Configuration for GreenSpark Platform
Settings are read from the environment (and a local .env file in development)
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = 'greenspark-dev-secret-change-me'


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    ENVIRONMENT = os.environ.get('ENVIRONMENT', 'production')
    DEBUG = os.environ.get('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Firebase / Firestore
    GOOGLE_APPLICATION_CREDENTIALS = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID')

    # Bearer tokens
    JWT_SECRET = os.environ.get('JWT_SECRET', DEFAULT_JWT_SECRET)
    JWT_ALGORITHM = 'HS256'
    TOKEN_TTL_DAYS = int(os.environ.get('TOKEN_TTL_DAYS', 7))

    # HTTP
    PORT = int(os.environ.get('PORT', 5000))
    API_PREFIX = os.environ.get('API_PREFIX', '/api')
    API_VERSION = os.environ.get('API_VERSION', '1.0.0')
    ALLOWED_ORIGINS = _split_origins(
        os.environ.get('ALLOWED_ORIGINS', 'http://localhost:5173,http://localhost:3000')
    )

    # Media uploads
    UPLOAD_FOLDER = os.path.abspath(os.environ.get('UPLOAD_FOLDER', 'uploads'))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
