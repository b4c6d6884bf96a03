"""
Base document model

Every entity is stored as a flat JSON document with camelCase keys, both in
the local store blobs and in the remote document collections.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialised with camelCase keys, accepting either spelling on input"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary"""
        return self.model_dump(mode='json', by_alias=True)


class Document(CamelModel):
    """Entity with an identity and store timestamps"""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ActivityLog(CamelModel):
    """Append-only history entry attached to a property or client"""
    id: str
    timestamp: datetime
    type: str = 'Nota'  # Nota, Llamada, Visita, Correo, ...
    description: str = ''
    author_id: Optional[str] = None
