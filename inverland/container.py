"""
Service container

Builds the stores and services from configuration and wires them together.
Callers receive the container instead of reaching for module globals.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from inverland.core.config import Settings, settings as default_settings
from inverland.core.database import create_engine_for, create_session_factory, init_db
from inverland.seed import SAMPLE_CAMPAIGNS, SAMPLE_CLIENTS, SAMPLE_PROPERTIES
from inverland.services import (
    AuthService,
    CampaignService,
    ClientService,
    PropertyService,
    SyncReport,
    UserService,
    UserSynchronizer,
)
from inverland.stores import (
    DocumentStore,
    FirestoreDocumentStore,
    LocalRepository,
    LocalStore,
    MemoryDocumentStore,
    RemoteRepository,
    TieredRepository,
)

logger = logging.getLogger(__name__)

_UNSET = object()


def create_remote_store(settings: Settings) -> Optional[DocumentStore]:
    """Remote document store for REMOTE_BACKEND (firestore, memory, none)"""
    backend = settings.REMOTE_BACKEND.strip().lower()
    if backend == 'firestore':
        return FirestoreDocumentStore(project_id=settings.FIRESTORE_PROJECT_ID)
    if backend == 'memory':
        return MemoryDocumentStore()
    if backend not in ('none', ''):
        logger.warning(f"Unknown REMOTE_BACKEND '{settings.REMOTE_BACKEND}', running local-only")
    return None


def create_local_store(settings: Settings) -> LocalStore:
    engine = create_engine_for(settings)
    init_db(engine)
    return LocalStore(create_session_factory(engine))


class Container:
    """Stores and services for one application instance"""

    def __init__(self, settings: Settings, local_store: LocalStore,
                 remote: Optional[DocumentStore] = None,
                 id_generator: Callable[[str], str] = None,
                 clock: Callable[[], datetime] = None):
        self.settings = settings
        self.local_store = local_store
        self.remote = remote
        self.sync_report: Optional[SyncReport] = None

        options = {'id_generator': id_generator, 'clock': clock}
        self.properties = PropertyService(
            self._repository('properties'), per_page=settings.PROPERTIES_PER_PAGE, **options
        )
        self.clients = ClientService(self._repository('clients'), **options)
        self.campaigns = CampaignService(self._repository('campaigns'), **options)
        self.users = UserService(
            self._repository('users'), properties=self.properties, clients=self.clients, **options
        )
        self.synchronizer = UserSynchronizer(
            self.users,
            remote=self.remote if self._is_remote('users') else None,
            collection='users',
            seed_defaults=settings.is_development,
        )

    def _is_remote(self, collection: str) -> bool:
        return self.remote is not None and collection in self.settings.REMOTE_COLLECTIONS

    def _repository(self, collection: str):
        key = self.settings.storage_key(collection)
        if not self._is_remote(collection):
            return LocalRepository(self.local_store, key)
        if self.settings.MIRROR_REMOTE_LOCALLY:
            return TieredRepository(self.remote, collection, self.local_store, key)
        return RemoteRepository(self.remote, collection)

    def load(self) -> SyncReport:
        """Load every collection; users go through startup synchronisation"""
        with_samples = self.settings.SEED_SAMPLE_DATA
        self.properties.load(SAMPLE_PROPERTIES if with_samples else None)
        self.clients.load(SAMPLE_CLIENTS if with_samples else None)
        self.campaigns.load(SAMPLE_CAMPAIGNS if with_samples else None)
        report = self.synchronizer.initialize()
        self.sync_report = report
        logger.info(
            f"Loaded {len(self.properties)} properties, {len(self.clients)} clients, "
            f"{len(self.campaigns)} campaigns, {report.users} users (from {report.source})"
        )
        return report

    def auth(self, session_store) -> AuthService:
        return AuthService(self.users, session_store)


def build_container(settings: Settings = None, remote=_UNSET, local_store: LocalStore = None,
                    id_generator: Callable[[str], str] = None,
                    clock: Callable[[], datetime] = None, load: bool = True) -> Container:
    """
    Build a container from settings

    Args:
        settings: Application settings (module settings if not provided)
        remote: Remote store override; None forces local-only
        local_store: Local store override
        id_generator: Callable(prefix) -> id
        clock: Callable() -> datetime
        load: Load collections and synchronise users immediately
    """
    settings = settings or default_settings
    if remote is _UNSET:
        remote = create_remote_store(settings)
    container = Container(
        settings,
        local_store or create_local_store(settings),
        remote=remote,
        id_generator=id_generator,
        clock=clock,
    )
    if load:
        container.load()
    return container
