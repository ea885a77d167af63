#!/usr/bin/env python3
"""Apply Alembic migrations up to head, reporting failures to Logfire."""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from portal.config import Settings
from portal.util.logging import setup_logging
from portal.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main() -> int:
    """Upgrade the schema; a failure aborts startup with a logged traceback."""
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    with logfire.span("run_migrations", environment=settings.environment):
        try:
            alembic_cfg = Config(str(ALEMBIC_INI))
            alembic_cfg.set_main_option(
                "script_location", str(ALEMBIC_INI.parent / "migrations")
            )
            command.upgrade(alembic_cfg, "head")
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The service must not start against a half-migrated schema
            raise

    logfire.info("Database schema is at head")
    return 0


if __name__ == "__main__":
    sys.exit(main())
