"""
Collection persistence strategies

An entity service writes through one of these. Local-only keeps the whole
collection as a local blob; remote-only writes each document to the document
store; tiered treats the document store as authoritative and the local blob as
a best-effort read cache.
"""
import logging
from typing import Any, Dict, List, Optional

from .local import LocalStore
from .remote import DocumentStore, RemoteStoreError

logger = logging.getLogger(__name__)


class LocalRepository:
    """Local-only persistence for one collection"""

    def __init__(self, local_store: LocalStore, key: str):
        self.local_store = local_store
        self.key = key

    def load(self) -> Optional[List[Dict[str, Any]]]:
        """Stored documents, or None when nothing was ever saved"""
        return self.local_store.load(self.key)

    def load_cached(self) -> Optional[List[Dict[str, Any]]]:
        return self.local_store.load(self.key)

    def create(self, document: Dict[str, Any]) -> Optional[str]:
        """Write a new document. Returns a store-assigned id, if any."""
        return None

    def replace(self, entity_id: str, document: Dict[str, Any]) -> None:
        pass

    def remove(self, entity_id: str) -> None:
        pass

    def save_all(self, documents: List[Dict[str, Any]]) -> bool:
        return self.local_store.save(self.key, documents)


class RemoteRepository:
    """Remote-only persistence for one collection"""

    def __init__(self, remote: DocumentStore, collection: str):
        self.remote = remote
        self.collection = collection

    def load(self) -> Optional[List[Dict[str, Any]]]:
        return self.remote.get_all(self.collection)

    def load_cached(self) -> Optional[List[Dict[str, Any]]]:
        return None

    def create(self, document: Dict[str, Any]) -> Optional[str]:
        return self.remote.add(self.collection, document)

    def replace(self, entity_id: str, document: Dict[str, Any]) -> None:
        self.remote.update(self.collection, entity_id, document)

    def remove(self, entity_id: str) -> None:
        self.remote.delete(self.collection, entity_id)

    def save_all(self, documents: List[Dict[str, Any]]) -> bool:
        return True


class TieredRepository(LocalRepository):
    """
    Remote store is authoritative when reachable; the local blob mirrors it.

    Only load() falls back to the local cache. Writes go to the remote store
    first and a RemoteStoreError aborts them before anything is mirrored.
    """

    def __init__(self, remote: DocumentStore, collection: str, local_store: LocalStore, key: str):
        super().__init__(local_store, key)
        self.remote = remote
        self.collection = collection

    def load(self) -> Optional[List[Dict[str, Any]]]:
        try:
            return self.remote.get_all(self.collection)
        except RemoteStoreError as e:
            logger.warning(f"Remote {self.collection} unavailable, using local cache: {e.message}")
            return self.load_cached()

    def create(self, document: Dict[str, Any]) -> Optional[str]:
        return self.remote.add(self.collection, document)

    def replace(self, entity_id: str, document: Dict[str, Any]) -> None:
        self.remote.update(self.collection, entity_id, document)

    def remove(self, entity_id: str) -> None:
        self.remote.delete(self.collection, entity_id)
