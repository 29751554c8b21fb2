"""
bakery_api.auth

Authentication/authorization package.

Responsibilities:
- Session token helpers and the session store boundary.
- Request guards (identity resolution + role hierarchy checks).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Guards raise typed errors from `bakery_api.errors`; they never build responses.
