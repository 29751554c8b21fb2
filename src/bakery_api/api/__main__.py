"""
bakery_api.api.__main__

Entrypoint for running the FastAPI application via `python -m bakery_api.api`.

Responsibilities:
- Load settings (fatal when a required value is missing).
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import pydantic
import uvicorn

from bakery_api.api.app import create_app
from bakery_api.observability.logging import configure_logging, get_logger
from bakery_api.settings import get_settings


def main() -> None:
    try:
        settings = get_settings()
    except pydantic.ValidationError as e:
        configure_logging(service_name="bakery-api", level="INFO")
        get_logger(__name__).error(
            "configuration_invalid",
            fields=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
        )
        raise SystemExit(1) from e

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
