"""
User service

Registration, profile edits and guarded deletion of dashboard users.
Usernames are unique within the collection.
"""
import logging
from typing import Any, Mapping, Optional

from inverland.core.security import hash_password
from inverland.models import SessionUser, User
from .base import EntityService, locked
from .errors import (
    AdminDeletionError,
    DuplicateUsernameError,
    SelfDeletionError,
    UserInUseError,
)

logger = logging.getLogger(__name__)


class UserService(EntityService):
    """Dashboard users"""
    model = User
    entity_name = 'user'
    id_prefix = 'user'

    def __init__(self, repository, properties=None, clients=None, **kwargs):
        """
        Args:
            repository: Persistence strategy for the user collection
            properties: PropertyService checked before deleting an agent
            clients: ClientService checked before deleting an agent
        """
        super().__init__(repository, **kwargs)
        self.properties = properties
        self.clients = clients

    def find_by_username(self, username: str) -> Optional[User]:
        for user in self._items:
            if user.username == username:
                return user
        return None

    def register(self, data: Mapping[str, Any]) -> User:
        """
        Create a user from registration data with a plaintext 'password'.

        Raises:
            DuplicateUsernameError: username already taken (nothing is written)
        """
        fields = dict(data)
        password = fields.pop('password', None)
        if password:
            fields['passwordHash'] = hash_password(password)
            fields.pop('password_hash', None)
        if fields.get('role', 'user') != 'agent':
            fields.pop('commissionRate', None)
            fields.pop('commission_rate', None)
        user = self.add(fields)
        logger.info(f"Registered user {user.username} ({user.role})")
        return user

    @locked
    def set_password(self, user_id: str, password: str) -> User:
        user = self.require(user_id)
        updated = user.model_copy(update={
            'password_hash': hash_password(password),
            'updated_at': self.clock(),
        })
        return self._replace_many([updated])[0]

    @locked
    def delete(self, user_id: str, actor: SessionUser = None) -> bool:
        """
        Delete a user on behalf of actor.

        Raises:
            SelfDeletionError: actor deleting their own account
            AdminDeletionError: an admin deleting another admin
            UserInUseError: user still assigned to a property or client
        """
        target = self.get(user_id)
        if target is None:
            return False
        if actor is not None:
            if actor.id == user_id:
                raise SelfDeletionError()
            if actor.is_admin and target.is_admin:
                raise AdminDeletionError(target.username)
        return super().delete(user_id)

    # ==================== HOOKS ====================

    def _before_add(self, entity: User) -> User:
        if self.find_by_username(entity.username) is not None:
            raise DuplicateUsernameError(entity.username)
        return entity

    def _before_update(self, current: User, entity: User) -> User:
        other = self.find_by_username(entity.username)
        if other is not None and other.id != entity.id:
            raise DuplicateUsernameError(entity.username)
        if not entity.password_hash:
            entity = entity.model_copy(update={'password_hash': current.password_hash})
        return entity

    def _before_delete(self, entity: User) -> None:
        if self.properties is not None:
            for prop in self.properties.by_agent(entity.id):
                raise UserInUseError(entity.id, 'property', prop.id, prop.title)
        if self.clients is not None:
            for client in self.clients.by_agent(entity.id):
                raise UserInUseError(entity.id, 'client', client.id, client.name)
