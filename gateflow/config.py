import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _env_int(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    """Runtime configuration read from the environment (and .env)."""

    SECRET_KEY = os.getenv('SECRET_KEY', 'FB27D156173716A31912F1BD6CEDB')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///gateflow.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 1800,  # Recycle connections after 30 minutes
        'pool_pre_ping': True,
    }
    JSON_SORT_KEYS = False

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'c2lrbG9NTkw')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=_env_int('JWT_ACCESS_TOKEN_HOURS', 1))

    # Werkzeug method string; the work factor is fixed per deployment
    PASSWORD_HASH_METHOD = os.getenv('PASSWORD_HASH_METHOD', 'scrypt')
    PASSWORD_MIN_LENGTH = 8
    RESET_TOKEN_TTL_MINUTES = _env_int('RESET_TOKEN_TTL_MINUTES', 15)
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

    SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY')
    SENDER_EMAIL = os.getenv('SENDER_EMAIL')

    CORS_ORIGINS = [origin.strip() for origin in os.getenv('CORS_ORIGINS', '*').split(',')]
    SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE', 'eventlet')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class ProductionConfig(Config):
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 20,
        'pool_recycle': 1800,
        'pool_pre_ping': True,
        'pool_timeout': 30,
        'max_overflow': 10,
        'echo': False
    }


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = 'test-jwt-secret-key-for-testing-only'
    SENDGRID_API_KEY = None
    SENDER_EMAIL = None
    SOCKETIO_ASYNC_MODE = 'threading'
    # Cheap KDF so fixtures stay fast; production keeps scrypt
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'


CONFIGS = {
    'development': Config,
    'production': ProductionConfig,
    'testing': TestConfig,
}


def load_config_class(environment=None):
    """Config class for ``environment``, read from GATEFLOW_ENVIRONMENT when omitted."""
    environment = environment or os.getenv('GATEFLOW_ENVIRONMENT', 'development')
    return CONFIGS.get(environment.strip().lower(), Config)
