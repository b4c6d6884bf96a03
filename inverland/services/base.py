"""
Entity service base

Each service exclusively owns one ordered in-memory collection. Mutations
validate first, write through the persistence strategy, then replace the
in-memory list wholesale and mirror it to the local store, so readers never
see a half-applied change.
"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from inverland.models import ActivityLog, Document
from .errors import EntityNotFoundError

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    """Random unique id such as 'prop-3f2a...'"""
    return f"{prefix}-{uuid.uuid4().hex}"


class SequentialIdGenerator:
    """Deterministic ids per prefix: 'prop-1', 'prop-2', ..."""

    def __init__(self, start: int = 1):
        self.start = start
        self._counters: Dict[str, int] = {}

    def __call__(self, prefix: str) -> str:
        value = self._counters.get(prefix, self.start - 1) + 1
        self._counters[prefix] = value
        return f"{prefix}-{value}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def locked(method):
    """Run a service method while holding the collection lock"""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class EntityService:
    """CRUD over one entity collection"""
    model = Document
    entity_name = 'entity'
    id_prefix = 'doc'

    def __init__(self, repository, id_generator: Callable[[str], str] = None,
                 clock: Callable[[], datetime] = None):
        """
        Args:
            repository: Persistence strategy (local, remote or tiered)
            id_generator: Callable(prefix) -> new id
            clock: Callable() -> current datetime
        """
        self.repository = repository
        self.id_generator = id_generator or generate_id
        self.clock = clock or utcnow
        self._items: List[Any] = []
        # Held from validation through commit; reentrant for nested mutations
        self._lock = threading.RLock()

    # ==================== LOADING ====================

    @locked
    def load(self, samples: Iterable[Mapping[str, Any]] = None) -> List[Any]:
        """
        Load the collection from the persistence strategy.

        When nothing was ever stored and samples are given, start from the
        samples and persist them.
        """
        documents = self.repository.load()
        if documents is None and samples is not None:
            items = [self.model.model_validate(sample) for sample in samples]
            self._commit(items)
            logger.info(f"Seeded {len(items)} sample {self.entity_name}(s)")
            return self.all()

        self._items = self._parse(documents or [])
        return self.all()

    @locked
    def replace_all(self, documents: Iterable[Mapping[str, Any]]) -> List[Any]:
        """Replace the whole collection (used by synchronisation)"""
        self._commit(self._parse(documents))
        return self.all()

    def _parse(self, documents: Iterable[Mapping[str, Any]]) -> List[Any]:
        items = []
        for document in documents:
            try:
                items.append(self.model.model_validate(document))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {self.entity_name} {document.get('id')}: {e}")
        return items

    # ==================== QUERIES ====================

    def all(self) -> List[Any]:
        return list(self._items)

    def get(self, entity_id: str) -> Optional[Any]:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def require(self, entity_id: str) -> Any:
        item = self.get(entity_id)
        if item is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return item

    def __len__(self) -> int:
        return len(self._items)

    def new_id(self, prefix: str = None) -> str:
        return self.id_generator(prefix or self.id_prefix)

    # ==================== MUTATIONS ====================

    @locked
    def add(self, data: Mapping[str, Any]) -> Any:
        """Create an entity from data without an id"""
        now = self.clock()
        fields = {k: v for k, v in dict(data).items() if k != 'id'}
        entity = self.model.model_validate({**fields, 'id': self.new_id()})
        entity = entity.model_copy(update={'created_at': entity.created_at or now, 'updated_at': now})
        entity = self._before_add(entity)

        remote_id = self.repository.create(entity.to_dict())
        if remote_id:
            entity = entity.model_copy(update={'id': remote_id})

        self._commit(self._items + [entity])
        return entity

    @locked
    def update(self, entity) -> Any:
        """Replace a stored entity with the given version"""
        if isinstance(entity, Mapping):
            entity = self.model.model_validate(entity)
        current = self.require(entity.id)
        entity = self._before_update(current, entity)
        entity = entity.model_copy(update={
            'created_at': current.created_at,
            'updated_at': self.clock(),
        })
        return self._replace_many([entity])[0]

    @locked
    def patch(self, entity_id: str, changes: Mapping[str, Any]) -> Any:
        """Apply a partial change set (snake_case or camelCase keys)"""
        current = self.require(entity_id)
        data = {**current.to_dict(), **self._aliased(changes), 'id': entity_id}
        return self.update(self.model.model_validate(data))

    @locked
    def delete(self, entity_id: str) -> bool:
        """Remove an entity. Returns False when the id is unknown."""
        entity = self.get(entity_id)
        if entity is None:
            return False
        self._before_delete(entity)
        self.repository.remove(entity_id)
        self._commit([item for item in self._items if item.id != entity_id])
        return True

    # ==================== HOOKS ====================

    def _before_add(self, entity):
        return entity

    def _before_update(self, current, entity):
        return entity

    def _before_delete(self, entity) -> None:
        pass

    # ==================== INTERNALS ====================

    def _aliased(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        aliases = {name: field.alias or name for name, field in self.model.model_fields.items()}
        return {aliases.get(key, key): value for key, value in changes.items()}

    @locked
    def _append_activity(self, entity_id: str, activity: Mapping[str, Any]) -> Any:
        entity = self.require(entity_id)
        fields = {k: v for k, v in dict(activity).items() if k not in ('id', 'timestamp')}
        entry = ActivityLog.model_validate({
            **fields,
            'id': self.new_id('activity'),
            'timestamp': self.clock(),
        })
        updated = entity.model_copy(update={
            'activity_log': list(entity.activity_log) + [entry],
            'updated_at': self.clock(),
        })
        return self._replace_many([updated])[0]

    @locked
    def _replace_many(self, changed: List[Any]) -> List[Any]:
        for entity in changed:
            self.repository.replace(entity.id, entity.to_dict())
        by_id = {entity.id: entity for entity in changed}
        self._commit([by_id.get(item.id, item) for item in self._items])
        return changed

    def _commit(self, items: List[Any]) -> None:
        self._items = list(items)
        if not self.repository.save_all([item.to_dict() for item in self._items]):
            logger.warning(f"{self.entity_name} changes kept in memory only")
