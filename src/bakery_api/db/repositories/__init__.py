"""
bakery_api.db.repositories

Repository classes (one per aggregate).
"""

# Package marker.
