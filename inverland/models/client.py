"""
Client Model

CRM functionality: client/lead management and interaction tracking.
"""
import enum
from typing import List, Optional

from .base import ActivityLog, Document


class ClientStatus(str, enum.Enum):
    """Client status in pipeline"""
    NEW = "Nuevo"
    CONTACTED = "Contactado"
    QUALIFIED = "Calificado"
    NEGOTIATION = "Negociación"
    CLOSED = "Cerrado"
    LOST = "Perdido"


class Client(Document):
    """Client / prospect for CRM"""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    lead_source: Optional[str] = None  # Facebook, Portal, Referido, Sitio web, ...
    status: ClientStatus = ClientStatus.NEW
    assigned_agent_id: Optional[str] = None
    notes: Optional[str] = None
    activity_log: List[ActivityLog] = []
