"""
User synchronisation

Reconciles the remote user collection with the local cache on startup, seeds
the default accounts in development, and removes remote duplicates on demand.

Consistency rule: the remote store is authoritative when reachable; the local
store is a best-effort read cache used only when the remote read fails.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from inverland.core.security import hash_password
from inverland.stores.remote import DocumentStore, RemoteStoreError
from .users import UserService

logger = logging.getLogger(__name__)


DEFAULT_USERS = [
    {'username': 'admin', 'password': 'admin', 'role': 'admin', 'name': 'Administrador'},
    {'username': 'jhernandez', 'password': 'password', 'role': 'agent',
     'name': 'Juan Hernández', 'commissionRate': 0.025},
    {'username': 'agente', 'password': 'agente', 'role': 'agent',
     'name': 'Agente de Pruebas', 'commissionRate': 0.03},
    {'username': 'referido', 'password': 'password', 'role': 'referrer', 'name': 'Ana de Referidos'},
]


@dataclass
class SyncReport:
    """Outcome of startup synchronisation"""
    source: str  # remote, local, seed, empty
    users: int = 0
    seeded: List[str] = field(default_factory=list)
    duplicates: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'users': self.users,
            'seeded': self.seeded,
            'duplicates': self.duplicates,
        }


@dataclass
class DedupeReport:
    """Outcome of a duplicate clean-up"""
    kept: int = 0
    removed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'kept': self.kept, 'removed': self.removed}


def dedupe_by_username(documents: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split documents into (first per username, the rest), preserving order"""
    seen = set()
    kept, duplicates = [], []
    for document in documents:
        username = str(document.get('username', '')).strip()
        if username in seen:
            duplicates.append(document)
        else:
            seen.add(username)
            kept.append(document)
    return kept, duplicates


class UserSynchronizer:
    """Startup reconciliation between remote and local user records"""

    def __init__(self, users: UserService, remote: Optional[DocumentStore] = None,
                 collection: str = 'users', seed_defaults: bool = False):
        """
        Args:
            users: User service to populate
            remote: Remote document store (None when users are local-only)
            collection: Remote collection name
            seed_defaults: Seed the default accounts when no users exist
                (development environment only)
        """
        self.users = users
        self.remote = remote
        self.collection = collection
        self.seed_defaults = seed_defaults

    def initialize(self) -> SyncReport:
        """Populate the user service. Never raises on remote failure."""
        if self.remote is None:
            cached = self.users.repository.load_cached()
            if cached:
                self.users.replace_all(cached)
                return SyncReport('local', users=len(self.users))
            return self._seed_or_empty()

        try:
            documents = self.remote.get_all(self.collection)
        except RemoteStoreError as e:
            logger.warning(f"Could not fetch remote users, falling back to local cache: {e.message}")
            cached = self.users.repository.load_cached()
            if cached:
                self.users.replace_all(cached)
                return SyncReport('local', users=len(self.users))
            return self._seed_or_empty()

        if not documents:
            return self._seed_or_empty()

        kept, duplicates = dedupe_by_username(documents)
        if duplicates:
            logger.warning(
                f"{len(duplicates)} duplicate user record(s) in remote store; "
                f"run a duplicate clean-up to remove them"
            )
        self.users.replace_all(kept)
        logger.info(f"Loaded {len(kept)} user(s) from remote store")
        return SyncReport('remote', users=len(self.users), duplicates=len(duplicates))

    def force_clean_duplicates(self) -> DedupeReport:
        """
        Keep the earliest record per username and delete the rest remotely.

        Raises:
            RemoteStoreError: remote read or delete failed
        """
        if self.remote is None:
            kept, duplicates = dedupe_by_username([user.to_dict() for user in self.users.all()])
        else:
            kept, duplicates = dedupe_by_username(self.remote.get_all(self.collection))
            for document in duplicates:
                self.remote.delete(self.collection, document['id'])

        self.users.replace_all(kept)
        removed = [document['id'] for document in duplicates]
        logger.info(f"Duplicate clean-up kept {len(kept)} user(s), removed {len(removed)}")
        return DedupeReport(kept=len(kept), removed=removed)

    # ==================== SEEDING ====================

    def _seed_or_empty(self) -> SyncReport:
        if not self.seed_defaults:
            self.users.replace_all([])
            return SyncReport('empty')

        documents = [self._seed_account(account) for account in DEFAULT_USERS]
        self.users.replace_all(documents)
        usernames = [document['username'] for document in documents]
        logger.info(f"Seeded default users: {', '.join(usernames)}")
        return SyncReport('seed', users=len(self.users), seeded=usernames)

    def _seed_account(self, account: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in account.items() if k != 'password'}
        data['passwordHash'] = hash_password(account['password'])
        data['createdAt'] = self.users.clock().isoformat()

        if self.remote is not None:
            try:
                # Existence is checked by username, not id
                existing = self.remote.find_by_field(self.collection, 'username', data['username'])
                if existing:
                    return existing[0]
                return {**data, 'id': self.remote.add(self.collection, data)}
            except RemoteStoreError as e:
                logger.warning(f"Seeding {data['username']} locally only: {e.message}")

        return {**data, 'id': self.users.new_id()}
