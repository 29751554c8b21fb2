"""
bakery_api.pipeline

Request-processing pipeline.

Responsibilities:
- Declarative rule sets + validation (`rules`, `schemas`).
- Blanket input sanitization (`sanitize`).
- Endpoint declarations and the ordered guard chain (`endpoint`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Stages never build responses; failures are raised and turned into envelopes by `endpoint.dispatch`.
