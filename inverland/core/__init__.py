"""Core modules: config, database, security"""
from .config import Settings, settings
from .database import Base, create_engine_for, create_session_factory, init_db
from .security import hash_password, verify_password, has_permission, get_permissions, ROLES

__all__ = [
    'Settings', 'settings',
    'Base', 'create_engine_for', 'create_session_factory', 'init_db',
    'hash_password', 'verify_password', 'has_permission', 'get_permissions', 'ROLES'
]
