#!/usr/bin/env python3
"""Run the portal under uvicorn."""

import sys

import logfire
import uvicorn

from portal.config import Settings
from portal.util.logging import setup_logging
from portal.util.observability import configure_logfire


def main() -> int:
    settings = Settings()

    # Logfire first so configuration and import errors are reported
    configure_logfire(settings)
    setup_logging(settings)

    logfire.info("Starting portal", host=settings.host, port=settings.port)
    try:
        uvicorn.run(
            "portal.interface.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception:
        logfire.exception("Portal failed to start")
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
