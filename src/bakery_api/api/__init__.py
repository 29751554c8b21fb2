"""
bakery_api.api

API package for the bakery storefront service.

Responsibilities:
- FastAPI app factory, error normalizer and router modules.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: endpoint declarations + delegation to services.
