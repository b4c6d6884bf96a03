"""
Campaign Model

Marketing campaigns sent to a filtered audience of clients.
"""
import enum
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from .base import CamelModel, Document
from .client import Client, ClientStatus


class CampaignStatus(str, enum.Enum):
    """Campaign status. Sent is terminal."""
    DRAFT = "Draft"
    SENT = "Sent"


class AudienceFilter(CamelModel):
    """Client-selection predicate; an empty list matches everything for its dimension"""
    status: List[ClientStatus] = []
    lead_source: List[str] = []

    def matches(self, client: Client) -> bool:
        status_match = not self.status or client.status in self.status
        source_match = not self.lead_source or (
            client.lead_source is not None and client.lead_source in self.lead_source
        )
        return status_match and source_match

    def select(self, clients: List[Client]) -> List[Client]:
        return [client for client in clients if self.matches(client)]


class Campaign(Document):
    """Marketing campaign"""
    name: str
    subject: str = ''
    message: str = ''
    target_audience: AudienceFilter = Field(default_factory=AudienceFilter)
    status: CampaignStatus = CampaignStatus.DRAFT
    sent_at: Optional[datetime] = None
    sent_to_count: int = 0

    @property
    def is_sent(self) -> bool:
        return self.status == CampaignStatus.SENT
