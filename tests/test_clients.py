import pytest
from pydantic import ValidationError

from inverland.models import ClientStatus


def test_new_client_defaults(container):
    client = container.clients.add({'name': 'María López', 'email': 'maria@example.com'})

    assert client.id == 'client-1'
    assert client.status == ClientStatus.NEW
    assert client.activity_log == []
    assert client.to_dict()['status'] == 'Nuevo'


def test_unknown_status_rejected(container):
    with pytest.raises(ValidationError):
        container.clients.add({'name': 'X', 'status': 'Archivado'})


def test_pipeline_queries(container, agent):
    container.clients.add({'name': 'A', 'status': 'Nuevo', 'assignedAgentId': agent.id})
    container.clients.add({'name': 'B', 'status': 'Contactado'})
    container.clients.add({'name': 'C', 'status': 'Cerrado', 'assignedAgentId': agent.id})

    assert [c.name for c in container.clients.by_status('Nuevo', 'Contactado')] == ['A', 'B']
    assert [c.name for c in container.clients.by_agent(agent.id)] == ['A', 'C']


def test_status_change(container):
    client = container.clients.add({'name': 'María'})

    updated = container.clients.patch(client.id, {'status': 'Negociación'})
    assert updated.status == ClientStatus.NEGOTIATION
    assert container.clients.get(client.id).status == ClientStatus.NEGOTIATION


def test_activity_history(container, agent):
    client = container.clients.add({'name': 'María'})

    container.clients.add_activity(client.id, {'type': 'Llamada', 'description': 'Primer contacto',
                                               'authorId': agent.id})
    updated = container.clients.add_activity(client.id, {'type': 'Correo', 'description': 'Envío de fichas'})

    assert [entry.type for entry in updated.activity_log] == ['Llamada', 'Correo']
    assert updated.activity_log[0].author_id == agent.id


def test_clients_survive_reload(container, local_store):
    container.clients.add({'name': 'María'})
    container.clients.add({'name': 'Carlos'})

    container.clients.load()
    assert [c.name for c in container.clients.all()] == ['María', 'Carlos']
    assert len(local_store.load('inverland_clients')) == 2
