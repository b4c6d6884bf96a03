"""
Storage adapters: local blobs, remote documents, transient session, and the
persistence strategies built on them.
"""
from .local import LocalStore, LocalStoreEntry
from .remote import DocumentStore, FirestoreDocumentStore, MemoryDocumentStore, RemoteStoreError
from .repository import LocalRepository, RemoteRepository, TieredRepository
from .session import FlaskSessionStore, MemorySessionStore

__all__ = [
    'LocalStore', 'LocalStoreEntry',
    'DocumentStore', 'FirestoreDocumentStore', 'MemoryDocumentStore', 'RemoteStoreError',
    'LocalRepository', 'RemoteRepository', 'TieredRepository',
    'FlaskSessionStore', 'MemorySessionStore',
]
