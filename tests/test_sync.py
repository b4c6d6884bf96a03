import pytest

from inverland.core.security import hash_password
from inverland.services import (
    DEFAULT_USERS,
    SequentialIdGenerator,
    UserService,
    UserSynchronizer,
)
from inverland.services.sync import dedupe_by_username
from inverland.stores import LocalRepository, MemoryDocumentStore, RemoteStoreError, TieredRepository

DEFAULT_USERNAMES = [account['username'] for account in DEFAULT_USERS]


def make_users(local_store, clock, remote=None):
    if remote is None:
        repository = LocalRepository(local_store, 'inverland_users')
    else:
        repository = TieredRepository(remote, 'users', local_store, 'inverland_users')
    return UserService(repository, id_generator=SequentialIdGenerator(), clock=clock)


def remote_user(remote, username, role='agent'):
    return remote.add('users', {
        'username': username, 'name': username.title(), 'role': role,
        'passwordHash': hash_password('password'),
    })


def test_remote_users_loaded_and_mirrored(remote, local_store, clock):
    first = remote_user(remote, 'admin', role='admin')
    remote_user(remote, 'agente')
    users = make_users(local_store, clock, remote)

    report = UserSynchronizer(users, remote=remote, seed_defaults=True).initialize()

    assert report.source == 'remote'
    assert report.users == 2
    assert report.seeded == []
    assert users.find_by_username('admin').id == first
    assert [doc['username'] for doc in local_store.load('inverland_users')] == ['admin', 'agente']


def test_remote_is_authoritative_over_local_cache(remote, local_store, clock):
    local_store.save('inverland_users', [{'id': 'user-1', 'username': 'local-only'}])
    remote_user(remote, 'admin', role='admin')
    users = make_users(local_store, clock, remote)

    UserSynchronizer(users, remote=remote).initialize()

    assert [user.username for user in users.all()] == ['admin']
    assert [doc['username'] for doc in local_store.load('inverland_users')] == ['admin']


def test_remote_failure_falls_back_to_local_cache(failing_remote, local_store, clock):
    local_store.save('inverland_users', [
        {'id': 'user-1', 'username': 'admin', 'role': 'admin'},
        {'id': 'user-2', 'username': 'agente', 'role': 'agent'},
    ])
    users = make_users(local_store, clock, failing_remote)

    report = UserSynchronizer(users, remote=failing_remote, seed_defaults=True).initialize()

    assert report.source == 'local'
    assert [user.username for user in users.all()] == ['admin', 'agente']


def test_remote_failure_with_no_cache_seeds_locally(failing_remote, local_store, clock):
    users = make_users(local_store, clock, failing_remote)

    report = UserSynchronizer(users, remote=failing_remote, seed_defaults=True).initialize()

    assert report.source == 'seed'
    assert report.seeded == DEFAULT_USERNAMES
    assert [user.id for user in users.all()] == ['user-1', 'user-2', 'user-3', 'user-4']


def test_empty_remote_seeds_defaults_once(remote, local_store, clock):
    users = make_users(local_store, clock, remote)
    report = UserSynchronizer(users, remote=remote, seed_defaults=True).initialize()

    assert report.source == 'seed'
    assert [doc['username'] for doc in remote.get_all('users')] == DEFAULT_USERNAMES
    assert 'password' not in remote.get_all('users')[0]

    restarted = make_users(local_store, clock, remote)
    report = UserSynchronizer(restarted, remote=remote, seed_defaults=True).initialize()

    assert report.source == 'remote'
    assert report.users == len(DEFAULT_USERS)
    assert report.duplicates == 0


class LaggingDocumentStore(MemoryDocumentStore):
    """Collection listing that has not caught up with recent writes"""

    def get_all(self, collection):
        return []


def test_seeding_checks_existing_username(local_store, clock):
    remote = LaggingDocumentStore(clock=clock)
    existing = remote_user(remote, 'admin', role='admin')
    users = make_users(local_store, clock, remote)

    UserSynchronizer(users, remote=remote, seed_defaults=True).initialize()

    assert len(remote.find_by_field('users', 'username', 'admin')) == 1
    assert users.find_by_username('admin').id == existing
    assert len(users) == len(DEFAULT_USERS)


def test_production_with_empty_remote_has_no_users(remote, local_store, clock):
    users = make_users(local_store, clock, remote)

    report = UserSynchronizer(users, remote=remote, seed_defaults=False).initialize()

    assert report.source == 'empty'
    assert len(users) == 0
    assert remote.get_all('users') == []


def test_local_only_uses_cache_then_seeds(local_store, clock):
    users = make_users(local_store, clock)
    report = UserSynchronizer(users, seed_defaults=True).initialize()
    assert report.source == 'seed'

    restarted = make_users(local_store, clock)
    report = UserSynchronizer(restarted, seed_defaults=True).initialize()
    assert report.source == 'local'
    assert [user.username for user in restarted.all()] == DEFAULT_USERNAMES


def test_duplicates_reported_and_cleaned(remote, local_store, clock):
    first = remote_user(remote, 'admin', role='admin')
    remote_user(remote, 'agente')
    duplicate = remote_user(remote, 'admin', role='admin')
    users = make_users(local_store, clock, remote)
    synchronizer = UserSynchronizer(users, remote=remote)

    report = synchronizer.initialize()
    assert report.duplicates == 1
    assert users.find_by_username('admin').id == first
    assert len(remote.get_all('users')) == 3

    cleaned = synchronizer.force_clean_duplicates()
    assert cleaned.removed == [duplicate]
    assert cleaned.kept == 2
    assert [doc['id'] for doc in remote.find_by_field('users', 'username', 'admin')] == [first]


def test_clean_duplicates_propagates_remote_failure(failing_remote, local_store, clock):
    users = make_users(local_store, clock, failing_remote)
    synchronizer = UserSynchronizer(users, remote=failing_remote)

    with pytest.raises(RemoteStoreError):
        synchronizer.force_clean_duplicates()


def test_dedupe_keeps_first_occurrence():
    documents = [
        {'id': 'a', 'username': 'admin'},
        {'id': 'b', 'username': 'agente'},
        {'id': 'c', 'username': 'admin '},
    ]

    kept, duplicates = dedupe_by_username(documents)

    assert [doc['id'] for doc in kept] == ['a', 'b']
    assert [doc['id'] for doc in duplicates] == ['c']
