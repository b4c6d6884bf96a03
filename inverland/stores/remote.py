"""
Remote document store

CRUD over named collections of a hosted document database. Every write stamps
createdAt/updatedAt. Failures raise RemoteStoreError; there is no retry and
the caller owns any fallback.
"""
import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore import FieldFilter

logger = logging.getLogger(__name__)

# Keys owned by the store, never written from entity payloads
RESERVED_KEYS = ('id', 'createdAt', 'updatedAt')


class RemoteStoreError(Exception):
    """Custom exception for remote document store errors"""
    def __init__(self, message: str, collection: str = None, document_id: str = None):
        self.message = message
        self.collection = collection
        self.document_id = document_id
        super().__init__(self.message)


def _payload(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in RESERVED_KEYS}


class DocumentStore:
    """Interface shared by the remote store backends"""

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        """All documents of a collection, oldest first"""
        raise NotImplementedError

    def get_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """Create a document and return its store-assigned id"""
        raise NotImplementedError

    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, collection: str, document_id: str) -> None:
        raise NotImplementedError


class FirestoreDocumentStore(DocumentStore):
    """Google Cloud Firestore backend"""

    def __init__(self, project_id: str = None, client: firestore.Client = None):
        """
        Initialize Firestore client

        Args:
            project_id: GCP project (uses application default if not provided)
            client: Pre-built Firestore client
        """
        self.db = client or firestore.Client(project=project_id or None)
        logger.info(f"Firestore client initialized for project: {project_id or 'default'}")

    @staticmethod
    def _to_document(snapshot) -> Dict[str, Any]:
        data = snapshot.to_dict() or {}
        data['id'] = snapshot.id
        return data

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        try:
            query = self.db.collection(collection).order_by('createdAt')
            return [self._to_document(doc) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to get documents from {collection}: {e}")
            raise RemoteStoreError(f"Could not read {collection}: {e}", collection=collection) from e

    def get_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = self.db.collection(collection).document(document_id).get()
            if snapshot.exists:
                return self._to_document(snapshot)
            return None
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to get {collection}/{document_id}: {e}")
            raise RemoteStoreError(
                f"Could not read {collection}/{document_id}: {e}",
                collection=collection, document_id=document_id
            ) from e

    def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        try:
            query = self.db.collection(collection).where(filter=FieldFilter(field, '==', value))
            return [self._to_document(doc) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to query {collection} by {field}: {e}")
            raise RemoteStoreError(f"Could not query {collection}: {e}", collection=collection) from e

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        try:
            document = _payload(data)
            document['createdAt'] = firestore.SERVER_TIMESTAMP
            document['updatedAt'] = firestore.SERVER_TIMESTAMP
            _, doc_ref = self.db.collection(collection).add(document)
            logger.info(f"Created {collection}/{doc_ref.id}")
            return doc_ref.id
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to add document to {collection}: {e}")
            raise RemoteStoreError(f"Could not create in {collection}: {e}", collection=collection) from e

    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        try:
            document = _payload(data)
            document['updatedAt'] = firestore.SERVER_TIMESTAMP
            self.db.collection(collection).document(document_id).update(document)
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to update {collection}/{document_id}: {e}")
            raise RemoteStoreError(
                f"Could not update {collection}/{document_id}: {e}",
                collection=collection, document_id=document_id
            ) from e

    def delete(self, collection: str, document_id: str) -> None:
        try:
            self.db.collection(collection).document(document_id).delete()
            logger.info(f"Deleted {collection}/{document_id}")
        except gcp_exceptions.GoogleAPIError as e:
            logger.error(f"Failed to delete {collection}/{document_id}: {e}")
            raise RemoteStoreError(
                f"Could not delete {collection}/{document_id}: {e}",
                collection=collection, document_id=document_id
            ) from e


class MemoryDocumentStore(DocumentStore):
    """In-process document store for development and tests"""

    def __init__(self, clock: Callable[[], datetime] = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def get_all(self, collection: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._collection(collection).values()]

    def get_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        doc = self._collection(collection).get(document_id)
        return copy.deepcopy(doc) if doc is not None else None

    def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        return [
            copy.deepcopy(doc) for doc in self._collection(collection).values()
            if doc.get(field) == value
        ]

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        now = self.clock()
        document = copy.deepcopy(_payload(data))
        document.update({'id': document_id, 'createdAt': now, 'updatedAt': now})
        self._collection(collection)[document_id] = document
        return document_id

    def update(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        docs = self._collection(collection)
        if document_id not in docs:
            raise RemoteStoreError(
                f"No document to update: {collection}/{document_id}",
                collection=collection, document_id=document_id
            )
        docs[document_id].update(copy.deepcopy(_payload(data)))
        docs[document_id]['updatedAt'] = self.clock()

    def delete(self, collection: str, document_id: str) -> None:
        self._collection(collection).pop(document_id, None)
