"""
Business-rule errors

Each carries a user-facing message and the HTTP status the dashboard answers
with. Raising one aborts the operation before any collection is touched.
"""


class InverlandError(Exception):
    """Base class for rejected operations"""
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(InverlandError):
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class DuplicateUsernameError(InverlandError):
    status_code = 409

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"El usuario '{username}' ya existe.")


class SelfDeletionError(InverlandError):
    status_code = 409

    def __init__(self):
        super().__init__("No puedes eliminar al usuario con el que has iniciado sesión.")


class AdminDeletionError(InverlandError):
    status_code = 403

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Un administrador no puede eliminar a otro administrador ('{username}').")


class UserInUseError(InverlandError):
    """User still referenced by a property or client"""
    status_code = 409
    ENTITY_LABELS = {'property': 'la propiedad', 'client': 'el cliente'}

    def __init__(self, user_id: str, entity: str, entity_id: str, label: str = None):
        self.user_id = user_id
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"No se puede eliminar el usuario: está asignado a {self.ENTITY_LABELS.get(entity, entity)} "
            f"'{label or entity_id}'."
        )


class PermissionDeniedError(InverlandError):
    status_code = 403

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(f"Permission denied: {permission}")


class NotAuthenticatedError(InverlandError):
    status_code = 401

    def __init__(self):
        super().__init__("Authentication required")
