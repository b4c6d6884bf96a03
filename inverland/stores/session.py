"""
Transient session store

Holds the active session record (a password-free user projection). Lives for
the process (MemorySessionStore) or for the browser session cookie
(FlaskSessionStore).
"""
from typing import Any, Dict, Optional
from flask import session

SESSION_KEY = 'inverland_session'


class MemorySessionStore:
    """Process-scoped session record"""

    def __init__(self):
        self._record: Optional[Dict[str, Any]] = None

    def get(self) -> Optional[Dict[str, Any]]:
        return dict(self._record) if self._record is not None else None

    def set(self, record: Dict[str, Any]) -> None:
        self._record = dict(record)

    def clear(self) -> None:
        self._record = None


class FlaskSessionStore:
    """Session record kept in the signed Flask cookie session"""

    def __init__(self, key: str = SESSION_KEY):
        self.key = key

    def get(self) -> Optional[Dict[str, Any]]:
        return session.get(self.key)

    def set(self, record: Dict[str, Any]) -> None:
        session[self.key] = record

    def clear(self) -> None:
        session.pop(self.key, None)
