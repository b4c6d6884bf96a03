import pytest
from pydantic import ValidationError

from inverland.core.security import verify_password
from inverland.services import (
    AdminDeletionError,
    DuplicateUsernameError,
    SelfDeletionError,
    UserInUseError,
)


def test_default_accounts_seeded_in_development(container):
    usernames = [user.username for user in container.users.all()]
    assert usernames == ['admin', 'jhernandez', 'agente', 'referido']
    assert container.sync_report.source == 'seed'


def test_register_hashes_password(container):
    user = container.users.register({
        'username': 'lucia', 'password': 's3creta', 'name': 'Lucía', 'role': 'agent',
        'commissionRate': 0.02,
    })

    assert user.password_hash != 's3creta'
    assert verify_password('s3creta', user.password_hash)
    assert user.commission_rate == 0.02
    assert 'password' not in user.to_dict()
    assert 'passwordHash' not in user.to_public_dict()


def test_register_drops_commission_for_non_agents(container):
    user = container.users.register({
        'username': 'mirna', 'password': 'x', 'name': 'Mirna', 'role': 'referrer', 'commissionRate': 0.1,
    })
    assert user.commission_rate is None


def test_duplicate_username_rejected(container):
    before = len(container.users)

    with pytest.raises(DuplicateUsernameError) as exc_info:
        container.users.register({'username': 'admin', 'password': 'otra', 'name': 'Otro'})

    assert "'admin'" in exc_info.value.message
    assert len(container.users) == before
    assert len(container.remote.find_by_field('users', 'username', 'admin')) == 1


def test_username_must_not_be_blank(container):
    with pytest.raises(ValidationError):
        container.users.register({'username': '   ', 'password': 'x', 'name': 'Nadie'})


def test_commission_rate_is_a_fraction(container):
    with pytest.raises(ValidationError):
        container.users.register({
            'username': 'pct', 'password': 'x', 'name': 'Pct', 'role': 'agent', 'commissionRate': 3,
        })


def test_rename_to_existing_username_rejected(container, agent):
    with pytest.raises(DuplicateUsernameError):
        container.users.patch(agent.id, {'username': 'agente'})
    assert container.users.get(agent.id).username == 'jhernandez'


def test_update_without_password_keeps_hash(container, agent):
    updated = container.users.update(agent.model_copy(update={'name': 'Juan H.', 'password_hash': ''}))

    assert updated.name == 'Juan H.'
    assert updated.password_hash == agent.password_hash
    assert container.remote.get_by_id('users', agent.id)['name'] == 'Juan H.'


def test_cannot_delete_yourself(container, admin):
    with pytest.raises(SelfDeletionError):
        container.users.delete(admin.id, actor=admin.to_session())
    assert container.users.get(admin.id) is not None


def test_admin_cannot_delete_another_admin(container, admin):
    other = container.users.register({'username': 'root', 'password': 'x', 'name': 'Root', 'role': 'admin'})

    with pytest.raises(AdminDeletionError):
        container.users.delete(other.id, actor=admin.to_session())
    assert container.users.get(other.id) is not None


def test_agent_with_properties_cannot_be_deleted(container, admin, agent):
    prop = container.properties.add({'title': 'Casa en Cumbres', 'agentId': agent.id})

    with pytest.raises(UserInUseError) as exc_info:
        container.users.delete(agent.id, actor=admin.to_session())
    assert exc_info.value.entity == 'property'
    assert exc_info.value.entity_id == prop.id
    assert 'Casa en Cumbres' in exc_info.value.message

    container.properties.assign_properties_to_agent(agent.id, [])
    assert container.users.delete(agent.id, actor=admin.to_session()) is True
    assert container.users.get(agent.id) is None
    assert container.remote.get_by_id('users', agent.id) is None


def test_agent_with_clients_cannot_be_deleted(container, admin, agent):
    container.clients.add({'name': 'María López', 'assignedAgentId': agent.id})

    with pytest.raises(UserInUseError) as exc_info:
        container.users.delete(agent.id, actor=admin.to_session())
    assert exc_info.value.entity == 'client'


def test_delete_unknown_user(container, admin):
    assert container.users.delete('nobody', actor=admin.to_session()) is False


def test_user_changes_mirrored_locally(container, local_store):
    container.users.register({'username': 'lucia', 'password': 'x', 'name': 'Lucía'})

    cached = local_store.load('inverland_users')
    assert 'lucia' in [doc['username'] for doc in cached]


def test_role_permissions(container, admin, agent):
    referrer = container.users.find_by_username('referido')

    assert admin.has_permission('anything')
    assert agent.has_permission('properties')
    assert not agent.has_permission('manage_users')
    assert referrer.get_permissions() == ['view', 'clients']
    assert referrer.role_name == 'Referidor'
