"""
Password hashing and role permissions.
"""
from typing import List
from werkzeug.security import generate_password_hash, check_password_hash


# Role permissions mapping
ROLES = {
    'admin': {
        'name': 'Administrador',
        'permissions': ['view', 'properties', 'clients', 'campaigns', 'manage_users', 'settings']
    },
    'agent': {
        'name': 'Agente',
        'permissions': ['view', 'properties', 'clients', 'campaigns']
    },
    'referrer': {
        'name': 'Referidor',
        'permissions': ['view', 'clients']
    },
    'user': {
        'name': 'Usuario',
        'permissions': ['view']
    }
}


def hash_password(password: str) -> str:
    """Hash a password"""
    return generate_password_hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False
    return check_password_hash(hashed_password, plain_password)


def get_permissions(role: str) -> List[str]:
    """Get all permissions for a role"""
    return ROLES.get(role, {}).get('permissions', [])


def has_permission(role: str, permission: str) -> bool:
    """Check if a role grants a specific permission"""
    if role == 'admin':
        return True
    return permission in get_permissions(role)
