"""
Local persistent store

Keyed JSON blobs, one per entity collection. A failed read or write is logged
and reported through the return value; it never raises, so the in-memory
collection stays the source of truth for the life of the process.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.exc import SQLAlchemyError

from inverland.core.database import Base

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalStoreEntry(Base):
    """One serialised entity collection"""
    __tablename__ = 'local_store'

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)

    # Data
    data = Column(Text)  # JSON serialized collection
    count = Column(Integer, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'key': self.key,
            'count': self.count,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class LocalStore:
    """Keyed JSON blob store backed by the local database"""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def load(self, key: str) -> Optional[List[Any]]:
        """Get a stored collection, or None when the key is absent or unreadable"""
        db = self.session_factory()
        try:
            entry = db.query(LocalStoreEntry).filter(LocalStoreEntry.key == key).first()
            if entry is None or entry.data is None:
                return None
            return json.loads(entry.data)
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Failed to load '{key}' from local store: {e}")
            return None
        finally:
            db.close()

    def save(self, key: str, collection: List[Any]) -> bool:
        """Replace a stored collection. Returns False on failure."""
        db = self.session_factory()
        try:
            data = json.dumps(collection, ensure_ascii=False)

            entry = db.query(LocalStoreEntry).filter(LocalStoreEntry.key == key).first()
            if not entry:
                entry = LocalStoreEntry(key=key)
                db.add(entry)

            entry.data = data
            entry.count = len(collection) if isinstance(collection, list) else 1
            entry.updated_at = _utcnow()
            db.commit()
            return True
        except (SQLAlchemyError, TypeError, ValueError) as e:
            db.rollback()
            logger.error(f"Failed to save '{key}' to local store: {e}")
            return False
        finally:
            db.close()

    def remove(self, key: str) -> bool:
        """Delete a stored collection"""
        db = self.session_factory()
        try:
            db.query(LocalStoreEntry).filter(LocalStoreEntry.key == key).delete()
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to remove '{key}' from local store: {e}")
            return False
        finally:
            db.close()

    def entries(self) -> List[dict]:
        """Summary of every stored key"""
        db = self.session_factory()
        try:
            return [entry.to_dict() for entry in db.query(LocalStoreEntry).order_by(LocalStoreEntry.key)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list local store keys: {e}")
            return []
        finally:
            db.close()
