"""
bakery_api.api.routers

Endpoint declarations grouped by resource.
"""

# Package marker.
