"""
User Model

Dashboard users with role-based permissions.
"""
from typing import List, Literal, Optional
from pydantic import field_validator

from inverland.core.security import ROLES, get_permissions, has_permission
from .base import Document


Role = Literal['admin', 'agent', 'referrer', 'user']


class SessionUser(Document):
    """Password-free projection of a user, used as the session record"""
    username: str
    role: Role = 'user'
    name: str = ''
    commission_rate: Optional[float] = None

    @field_validator('username')
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('username must not be empty')
        return value

    @field_validator('commission_rate')
    @classmethod
    def _check_commission_rate(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 0 <= value <= 1:
            raise ValueError('commission rate must be a fraction between 0 and 1')
        return value

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def role_name(self) -> str:
        return ROLES.get(self.role, {}).get('name', 'Unknown')

    def has_permission(self, permission: str) -> bool:
        """Check if user has a specific permission"""
        return has_permission(self.role, permission)

    def get_permissions(self) -> List[str]:
        """Get all permissions for the user's role"""
        return get_permissions(self.role)


class User(SessionUser):
    """Dashboard user as stored in the user collection"""
    password_hash: str = ''

    def to_session(self) -> SessionUser:
        """Project to the session record (without password)"""
        return SessionUser.model_validate(self.model_dump(exclude={'password_hash'}))

    def to_public_dict(self) -> dict:
        """Convert to dictionary (without password)"""
        data = self.to_session().to_dict()
        data['roleName'] = self.role_name
        data['permissions'] = self.get_permissions()
        return data
