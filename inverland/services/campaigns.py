"""
Campaign service

Campaigns start as Draft and are sent exactly once; sending selects the
clients matching the audience filter at that moment.
"""
import logging
from typing import List

from inverland.models import Campaign, CampaignStatus, Client
from .base import EntityService, locked

logger = logging.getLogger(__name__)


class CampaignService(EntityService):
    """Marketing campaigns"""
    model = Campaign
    entity_name = 'campaign'
    id_prefix = 'campaign'

    def _before_add(self, entity: Campaign) -> Campaign:
        return entity.model_copy(update={
            'status': CampaignStatus.DRAFT,
            'sent_at': None,
            'sent_to_count': 0,
        })

    @locked
    def send(self, campaign_id: str, clients: List[Client]) -> List[Client]:
        """
        Send a Draft campaign.

        Returns the matched clients for downstream dispatch, or an empty list
        when the campaign is unknown or already sent.
        """
        campaign = self.get(campaign_id)
        if campaign is None or campaign.is_sent:
            logger.warning(f"Campaign {campaign_id} not found or already sent")
            return []

        targets = campaign.target_audience.select(clients)
        sent = campaign.model_copy(update={
            'status': CampaignStatus.SENT,
            'sent_at': self.clock(),
            'sent_to_count': len(targets),
            'updated_at': self.clock(),
        })
        self._replace_many([sent])
        logger.info(f"Campaign {campaign_id} sent to {len(targets)} client(s)")
        return targets

    def preview_audience(self, campaign_id: str, clients: List[Client]) -> List[Client]:
        """Clients the campaign would reach if sent now"""
        return self.require(campaign_id).target_audience.select(clients)
