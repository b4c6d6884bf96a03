"""
Client service

CRM pipeline: clients/leads with agent assignment and activity history.
"""
from typing import Any, List, Mapping

from inverland.models import Client
from .base import EntityService


class ClientService(EntityService):
    """Clients and leads"""
    model = Client
    entity_name = 'client'
    id_prefix = 'client'

    def by_agent(self, agent_id: str) -> List[Client]:
        return [client for client in self._items if client.assigned_agent_id == agent_id]

    def by_status(self, *statuses: str) -> List[Client]:
        return [client for client in self._items if client.status in statuses]

    def add_activity(self, client_id: str, activity: Mapping[str, Any]) -> Client:
        """Append an entry to the client's activity log"""
        return self._append_activity(client_id, activity)
