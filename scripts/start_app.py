#!/usr/bin/env python3
"""Serve the gate auth API.

Logging and Logfire are configured before uvicorn imports the app factory,
so failures while building the app are reported too.
"""

import sys

import logfire
import uvicorn

from gate.config import Settings
from gate.util.logging import setup_logging
from gate.util.observability import configure_logfire

APP_FACTORY = "gate.interface.api.app:create_app"
PLACEHOLDER_SERVICE_KEY = "CHANGE_ME_IN_PRODUCTION"


def main() -> int:
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    # The identity client is built lazily, so a missing key would only show up
    # on the first login
    if settings.identity.service_key in ("", PLACEHOLDER_SERVICE_KEY):
        logfire.warn(
            "Identity provider service key is not configured",
            identity_url=settings.identity.url,
        )

    try:
        logfire.info(
            "Starting gate auth API",
            host=settings.host,
            port=settings.port,
            git_sha=settings.git_sha,
        )
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "Gate auth API failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
