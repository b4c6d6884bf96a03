from inverland.container import build_container, create_remote_store
from inverland.seed import SAMPLE_CAMPAIGNS, SAMPLE_CLIENTS, SAMPLE_PROPERTIES
from inverland.stores import LocalRepository, MemoryDocumentStore, RemoteRepository, TieredRepository

from .conftest import make_settings


def test_remote_backend_selection():
    assert isinstance(create_remote_store(make_settings(REMOTE_BACKEND='memory')), MemoryDocumentStore)
    assert create_remote_store(make_settings(REMOTE_BACKEND='none')) is None
    assert create_remote_store(make_settings(REMOTE_BACKEND='carrier-pigeon')) is None


def test_only_listed_collections_go_remote(container):
    assert isinstance(container.users.repository, TieredRepository)
    assert isinstance(container.properties.repository, LocalRepository)
    assert not isinstance(container.properties.repository, TieredRepository)


def test_remote_without_local_mirror(local_store, remote):
    settings = make_settings(MIRROR_REMOTE_LOCALLY=False, REMOTE_COLLECTIONS=['users', 'clients'])

    container = build_container(settings, remote=remote, local_store=local_store)

    assert isinstance(container.clients.repository, RemoteRepository)
    container.clients.add({'name': 'María'})
    assert [doc['name'] for doc in remote.get_all('clients')] == ['María']
    assert local_store.load('inverland_clients') is None


def test_sample_data_seeded_on_first_run(local_store, remote, clock):
    settings = make_settings(SEED_SAMPLE_DATA=True)

    container = build_container(settings, remote=remote, local_store=local_store, clock=clock)

    assert len(container.properties) == len(SAMPLE_PROPERTIES)
    assert len(container.clients) == len(SAMPLE_CLIENTS)
    assert len(container.campaigns) == len(SAMPLE_CAMPAIGNS)
    assert len(local_store.load('inverland_properties')) == len(SAMPLE_PROPERTIES)


def test_stored_data_wins_over_samples(local_store, remote, clock):
    settings = make_settings(SEED_SAMPLE_DATA=True)
    first = build_container(settings, remote=remote, local_store=local_store, clock=clock)
    first.properties.delete('prop-sample-1')

    second = build_container(settings, remote=remote, local_store=local_store, clock=clock)

    assert [prop.id for prop in second.properties.all()] == ['prop-sample-2', 'prop-sample-3']


def test_production_does_not_seed_users(local_store, remote):
    settings = make_settings(ENVIRONMENT='production')

    container = build_container(settings, remote=remote, local_store=local_store)

    assert container.sync_report.source == 'empty'
    assert len(container.users) == 0


def test_local_only_container(local_store):
    container = build_container(make_settings(REMOTE_BACKEND='none'), local_store=local_store)

    assert container.remote is None
    assert isinstance(container.users.repository, LocalRepository)
    assert container.sync_report.source == 'seed'
    assert local_store.load('inverland_users') is not None
