"""
Entity Models for Inverland CRM

Includes:
- User / SessionUser: Authentication and authorization
- Property: Property listings
- Client: Client/lead pipeline
- Campaign / AudienceFilter: Marketing campaigns
- ActivityLog: Append-only history on properties and clients
"""
from .base import ActivityLog, CamelModel, Document
from .user import Role, SessionUser, User
from .property import OperationType, Property, PropertyType
from .client import Client, ClientStatus
from .campaign import AudienceFilter, Campaign, CampaignStatus

__all__ = [
    'ActivityLog', 'CamelModel', 'Document',
    'Role', 'SessionUser', 'User',
    'OperationType', 'Property', 'PropertyType',
    'Client', 'ClientStatus',
    'AudienceFilter', 'Campaign', 'CampaignStatus',
]
