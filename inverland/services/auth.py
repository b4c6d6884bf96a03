"""
Session / authentication

Validates credentials against the user collection and keeps a password-free
copy of the logged-in user in a transient session store.
"""
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from inverland.core.security import verify_password
from inverland.models import SessionUser, User
from .errors import NotAuthenticatedError, PermissionDeniedError
from .users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """Login state for one session store"""

    def __init__(self, users: UserService, session_store):
        self.users = users
        self.session_store = session_store

    @property
    def current_user(self) -> Optional[SessionUser]:
        record = self.session_store.get()
        if not record:
            return None
        try:
            return SessionUser.model_validate(record)
        except ValidationError:
            logger.warning("Discarding unreadable session record")
            self.session_store.clear()
            return None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, username: str, password: str) -> bool:
        """Start a session when username and password match a user"""
        user = self.users.find_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for '{username}'")
            return False
        self._store(user)
        logger.info(f"User {user.username} logged in")
        return True

    def logout(self) -> None:
        self.session_store.clear()

    def require_user(self) -> SessionUser:
        user = self.current_user
        if user is None:
            raise NotAuthenticatedError()
        return user

    def require_permission(self, permission: str) -> SessionUser:
        user = self.require_user()
        if not user.has_permission(permission):
            raise PermissionDeniedError(permission)
        return user

    # ==================== USER MAINTENANCE ====================

    def update_user(self, user: User) -> User:
        """Update a user, re-deriving the session record if it is the active user"""
        updated = self.users.update(user)
        self._refresh(updated)
        return updated

    def patch_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        changes = dict(changes)
        password = changes.pop('password', None)
        updated = self.users.patch(user_id, changes) if changes else self.users.require(user_id)
        if password:
            updated = self.users.set_password(user_id, password)
        self._refresh(updated)
        return updated

    def delete_user(self, user_id: str) -> bool:
        """Delete a user on behalf of the active session"""
        return self.users.delete(user_id, actor=self.current_user)

    def refresh(self) -> Optional[SessionUser]:
        """Re-read the active user; ends the session if the user is gone"""
        current = self.current_user
        if current is None:
            return None
        user = self.users.get(current.id)
        if user is None:
            self.logout()
            return None
        self._store(user)
        return self.current_user

    def _refresh(self, user: User) -> None:
        current = self.current_user
        if current is not None and current.id == user.id:
            self._store(user)

    def _store(self, user: User) -> None:
        self.session_store.set(user.to_session().to_dict())
