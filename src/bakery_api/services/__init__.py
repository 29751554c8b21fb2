"""
bakery_api.services

Service layer package.

Responsibilities:
- Business rules invoked by endpoint handlers.
"""

# Package marker.
