"""Standard library logging routed through Logfire."""

import logging

import logfire

from portal.config import Settings

# Chatty at INFO; their spans already come from Logfire instrumentation
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(settings: Settings) -> None:
    """Send ``logging`` records to Logfire.

    Route handlers and scripts log through the standard library. Records
    are attached to the active Logfire span and printed by Logfire's
    console exporter, so no stream handler is installed.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        handlers=[logfire.LogfireLoggingHandler()],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: environment={settings.environment}, "
        f"level={logging.getLevelName(level)}"
    )
