import os
from dotenv import load_dotenv

load_dotenv()


def _bool_env(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bounded pool; waiting longer than DB_POOL_TIMEOUT seconds for a
    # connection surfaces as StoreUnavailable
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', 20))
    DB_POOL_TIMEOUT = float(os.getenv('DB_POOL_TIMEOUT', 0.5))
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': DB_POOL_SIZE,
        'max_overflow': 0,
        'pool_timeout': DB_POOL_TIMEOUT,
        'pool_pre_ping': True,
    }

    # Signed session cookie
    SECRET_KEY = os.getenv('SESSION_SECRET')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = _bool_env('SESSION_COOKIE_SECURE')

    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_TTL_HOURS = int(os.getenv('JWT_TTL_HOURS', 1))

    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

    MEDIA_ROOT = os.getenv('MEDIA_ROOT', os.path.join(os.getcwd(), 'media'))
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_BYTES', 5 * 1024 * 1024))


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SECRET_KEY = 'test-session-secret'
    JWT_SECRET = 'test-jwt-secret'
    SESSION_COOKIE_SECURE = False
    MEDIA_ROOT = None
