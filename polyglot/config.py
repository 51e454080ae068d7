"""Environment-driven configuration for the translation backend."""
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def _database_url(default: str) -> str:
    url = os.getenv('DATABASE_URL', default)
    # Render/Heroku still hand out postgres:// URLs
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///polyglot.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = True

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Text cache (Redis when REDIS_URL is set, in-process memory otherwise)
    REDIS_URL = os.getenv('REDIS_URL', '')
    TRANSLATION_CACHE_ENABLED = _env_bool('TRANSLATION_CACHE_ENABLED', True)
    TRANSLATION_CACHE_TTL = int(os.getenv('TRANSLATION_CACHE_TTL', 86400))

    # Machine translation provider
    TRANSLATION_SERVICE = os.getenv('TRANSLATION_SERVICE', 'google')
    GOOGLE_TRANSLATE_API_KEY = os.getenv('GOOGLE_TRANSLATE_API_KEY', '')
    DEEPL_API_KEY = os.getenv('DEEPL_API_KEY', '')
    TRANSLATION_TIMEOUT = float(os.getenv('TRANSLATION_TIMEOUT', 10))


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    REDIS_URL = ''
    TRANSLATION_CACHE_ENABLED = True
    GOOGLE_TRANSLATE_API_KEY = ''
    DEEPL_API_KEY = ''
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    DEBUG = False
    AUTO_CREATE_TABLES = False


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(config_name: str):
    """Return the config class for ``config_name`` (development if unknown)."""
    return CONFIGS.get(config_name, DevelopmentConfig)
