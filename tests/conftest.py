"""Shared test fixtures."""
import os

# Must be set before leadwell.config is imported
os.environ.setdefault('OPENAI_API_KEY', 'sk-test')
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('STORAGE_BACKEND', 'memory')

import pytest
from unittest.mock import patch
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leadwell.database import Base, import_models, make_engine
from leadwell.storage.memory import MemoryStorage
from leadwell.storage.sql import SqlStorage


class FakeRedis:
    """Minimal in-memory Redis fake covering the hash commands the breaker uses."""

    def __init__(self):
        self.hash_store = {}

    def hset(self, key, field=None, value=None, mapping=None):
        h = self.hash_store.setdefault(key, {})
        if mapping:
            h.update({k: str(v) for k, v in mapping.items()})
        if field is not None:
            h[field] = str(value)

    def hincrby(self, key, field, amount=1):
        h = self.hash_store.setdefault(key, {})
        h[field] = str(int(h.get(field, 0)) + amount)
        return int(h[field])

    def hgetall(self, key):
        return dict(self.hash_store.get(key, {}))


@pytest.fixture(autouse=True)
def fake_redis():
    """Every test gets fresh breakers backed by an in-memory Redis."""
    from leadwell.services import circuit_breaker
    fake = FakeRedis()
    with patch('leadwell.extensions.redis_client', fake), \
            patch.dict(circuit_breaker._registry, clear=True):
        circuit_breaker.init_breakers(fake)
        yield fake


@pytest.fixture
def db_engine():
    """In-memory SQLite engine (one shared connection) with schema created."""
    engine = make_engine('sqlite://', poolclass=StaticPool)
    import_models()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest.fixture
def sql_storage(session_factory):
    return SqlStorage(session_factory)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture(params=['memory', 'sql'])
def storage(request):
    """Runs the test once per storage backend."""
    return request.getfixturevalue(f'{request.param}_storage')


@pytest.fixture
def app(storage):
    """Flask test app bound to the parametrized storage backend."""
    from leadwell import create_app
    app = create_app(storage=storage)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_lead(storage):
    """Factory fixture — inserts a lead with sensible defaults."""
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        data = dict(
            name=f"Lead {counter['n']}",
            email=f"lead{counter['n']}@example.com",
            phone='555-0100',
            company='Acme Builders',
            project_type='Commercial Office',
            source='Website',
            score=50,
        )
        data.update(overrides)
        return storage.create_lead(data)
    return _make
