"""Shared pytest fixtures for the matching backend tests."""
import pytest

from app import create_app
from config import TestingConfig
from models import db, User
from repositories import UserRepository, SwipeRepository
from utils.cache import CacheManager
from utils.matching import MatchEngine
from utils.media import MediaCache
from utils.storage import BlobStore


class InMemoryRedis:
    """Test double for the handful of redis.Redis calls the cache uses."""

    def __init__(self):
        self.store = {}
        self.gets = 0

    def ping(self):
        return True

    def get(self, key):
        self.gets += 1
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = value
        return True

    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)


@pytest.fixture
def redis_double():
    return InMemoryRedis()


@pytest.fixture
def media_root(tmp_path):
    return str(tmp_path / "media")


@pytest.fixture
def app(media_root, redis_double):
    config = type("Config", (TestingConfig,), {"MEDIA_ROOT": media_root})
    app = create_app(config, cache_client=redis_double)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    """App context for tests that drive components directly."""
    with app.app_context():
        yield


@pytest.fixture
def users(ctx):
    return UserRepository(db.session)


@pytest.fixture
def engine(ctx):
    return MatchEngine(SwipeRepository(db.session))


@pytest.fixture
def media(ctx, users, media_root, redis_double):
    return MediaCache(users, BlobStore(media_root), CacheManager(redis_double))


@pytest.fixture
def make_user(ctx):
    """Insert a user row directly, optionally with a location."""
    def _make(username, lat=None, long=None):
        user = User(username=username, password="not-a-real-hash", lat=lat, long=long)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def register(client):
    """POST /user through the test client; the client keeps the session cookie."""
    def _register(username, password):
        return client.post("/user", json={"username": username, "password": password})
    return _register
