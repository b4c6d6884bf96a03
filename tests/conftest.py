from datetime import datetime, timezone

import pytest

from inverland.container import build_container
from inverland.core.config import Settings
from inverland.core.database import create_engine_for, create_session_factory, init_db
from inverland.services import SequentialIdGenerator
from inverland.stores import DocumentStore, LocalStore, MemoryDocumentStore, RemoteStoreError


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FailingDocumentStore(DocumentStore):
    """Remote store that is never reachable"""

    def __init__(self):
        self.calls = []

    def _fail(self, operation, collection):
        self.calls.append((operation, collection))
        raise RemoteStoreError(f"{operation} failed: network unreachable", collection=collection)

    def get_all(self, collection):
        self._fail('get_all', collection)

    def get_by_id(self, collection, document_id):
        self._fail('get_by_id', collection)

    def find_by_field(self, collection, field, value):
        self._fail('find_by_field', collection)

    def add(self, collection, data):
        self._fail('add', collection)

    def update(self, collection, document_id, data):
        self._fail('update', collection)

    def delete(self, collection, document_id):
        self._fail('delete', collection)


def make_settings(**overrides):
    values = {
        'DATABASE_URL': 'sqlite://',
        'ENVIRONMENT': 'development',
        'REMOTE_BACKEND': 'memory',
        'SEED_SAMPLE_DATA': False,
        'SECRET_KEY': 'test-secret',
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def local_store(settings):
    engine = create_engine_for(settings)
    init_db(engine)
    return LocalStore(create_session_factory(engine))


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def id_generator():
    return SequentialIdGenerator()


@pytest.fixture
def remote(clock):
    return MemoryDocumentStore(clock=clock)


@pytest.fixture
def failing_remote():
    return FailingDocumentStore()


@pytest.fixture
def container(settings, local_store, remote, id_generator, clock):
    return build_container(
        settings,
        remote=remote,
        local_store=local_store,
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def admin(container):
    return container.users.find_by_username('admin')


@pytest.fixture
def agent(container):
    return container.users.find_by_username('jhernandez')
