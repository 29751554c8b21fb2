"""
bakery_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Fail fast at startup when a required value (DB URL, session secret, CORS origin) is absent.
- Hide secrets from repr/logging (session secret, payment token).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PAYMENT_SETTINGS = ("square_access_token", "square_location_id", "square_application_id")


class Settings(BaseSettings):
    """
    Read once at process start and passed by reference:
    - Required values have no default; construction fails without them
    - Payment values are optional; their absence only degrades checkout
    """

    model_config = SettingsConfigDict(env_prefix="BAKERY_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "bakery-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Required
    database_url: str
    session_secret: str = Field(min_length=16, repr=False)
    cors_allowed_origin: str

    # Sessions
    session_cookie_name: str = "bakery_session"
    session_alg: str = "HS256"
    session_issuer: str = "bakery-api"
    session_audience: str = "bakery-storefront"
    session_ttl_minutes: int = Field(default=7 * 24 * 60, ge=1)

    # Payments (optional)
    square_access_token: str | None = Field(default=None, repr=False)
    square_location_id: str | None = None
    square_application_id: str | None = None
    square_environment: Literal["sandbox", "production"] = "sandbox"

    @property
    def expose_internals(self) -> bool:
        return self.env == "dev"

    def missing_payment_settings(self) -> list[str]:
        return [name for name in PAYMENT_SETTINGS if not getattr(self, name)]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; raises pydantic.ValidationError on missing required values.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Components receive Settings explicitly (app.state.settings) instead of reading
# the environment at arbitrary points.
