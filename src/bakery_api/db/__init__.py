"""
bakery_api.db

Persistence package.

Responsibilities:
- SQLAlchemy base, ORM models, session helpers.
- Repository classes used by the catalog service.
"""

# Package marker.
