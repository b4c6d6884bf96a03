"""
Property service

Owns the listing collection: CRUD, agent and client assignment, activity
history, and listing search.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional

from inverland.models import Property
from .base import EntityService, locked
from .search import Page, PropertyFilters, paginate

logger = logging.getLogger(__name__)


class PropertyService(EntityService):
    """Property listings"""
    model = Property
    entity_name = 'property'
    id_prefix = 'prop'

    def __init__(self, repository, per_page: int = 9, **kwargs):
        super().__init__(repository, **kwargs)
        self.per_page = per_page

    def by_agent(self, agent_id: str) -> List[Property]:
        return [prop for prop in self._items if prop.agent_id == agent_id]

    @locked
    def assign_properties_to_agent(self, agent_id: str, property_ids: Iterable[str]) -> List[Property]:
        """
        Make agent_id the owner of exactly property_ids.

        Listed properties are assigned to the agent; properties the agent held
        before that are not listed become unassigned. Returns the changed
        properties.
        """
        selected = set(property_ids)
        changed = []
        for prop in self._items:
            if prop.id in selected and prop.agent_id != agent_id:
                changed.append(prop.model_copy(update={'agent_id': agent_id, 'updated_at': self.clock()}))
            elif prop.agent_id == agent_id and prop.id not in selected:
                changed.append(prop.model_copy(update={'agent_id': None, 'updated_at': self.clock()}))

        unknown = selected - {prop.id for prop in self._items}
        if unknown:
            logger.warning(f"Ignoring unknown properties for agent {agent_id}: {sorted(unknown)}")

        if changed:
            self._replace_many(changed)
        return changed

    @locked
    def assign_client(self, property_id: str, client_id: Optional[str]) -> Property:
        """Link a client to a property (None clears the link)"""
        prop = self.require(property_id)
        updated = prop.model_copy(update={'client_id': client_id, 'updated_at': self.clock()})
        return self._replace_many([updated])[0]

    def add_activity(self, property_id: str, activity: Mapping[str, Any]) -> Property:
        """Append an entry to the property's activity log"""
        return self._append_activity(property_id, activity)

    # ==================== SEARCH ====================

    def filter(self, filters: PropertyFilters = None) -> List[Property]:
        if filters is None:
            return self.all()
        return filters.apply(self._items)

    def search(self, filters: PropertyFilters = None, page: int = 1, per_page: int = None) -> Page:
        """Filtered, paginated listings"""
        return paginate(self.filter(filters), page, per_page or self.per_page)

    def available_amenities(self) -> List[str]:
        """Every amenity tag in use, sorted"""
        return sorted({amenity for prop in self._items for amenity in prop.amenities})
