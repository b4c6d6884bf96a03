"""
Inverland CRM

Real-estate agency back office: property listings, clients, marketing
campaigns and dashboard users, persisted locally with an optional remote
document store for shared collections.
"""

__version__ = "1.0.0"
