"""
Services module for Inverland CRM
Contains the entity services, authentication and user synchronisation.
"""
from .errors import (
    InverlandError,
    EntityNotFoundError,
    DuplicateUsernameError,
    SelfDeletionError,
    AdminDeletionError,
    UserInUseError,
    PermissionDeniedError,
    NotAuthenticatedError,
)
from .base import EntityService, SequentialIdGenerator, generate_id, utcnow
from .search import Page, PropertyFilters, paginate
from .properties import PropertyService
from .clients import ClientService
from .campaigns import CampaignService
from .users import UserService
from .auth import AuthService
from .sync import DEFAULT_USERS, DedupeReport, SyncReport, UserSynchronizer

__all__ = [
    'InverlandError', 'EntityNotFoundError', 'DuplicateUsernameError', 'SelfDeletionError',
    'AdminDeletionError', 'UserInUseError', 'PermissionDeniedError', 'NotAuthenticatedError',
    'EntityService', 'SequentialIdGenerator', 'generate_id', 'utcnow',
    'Page', 'PropertyFilters', 'paginate',
    'PropertyService', 'ClientService', 'CampaignService', 'UserService',
    'AuthService',
    'DEFAULT_USERS', 'DedupeReport', 'SyncReport', 'UserSynchronizer',
]
