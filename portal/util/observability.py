"""Logfire configuration and instrumentation.

Domain services and repositories log and trace through ``logfire``
directly:

    with logfire.span("identity_reconciler.reconcile", external_id=external_id):
        logfire.info("User record created", user_id=str(user.id))
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from portal.config import Settings

# OpenID assertion material; Logfire already redacts session, cookie and api key names
SCRUBBED_ATTRIBUTES = [r"openid[._]sig", r"response_nonce"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire.

    Telemetry leaves the process only when a token is configured, unless
    OBSERVABILITY__SEND_TO_LOGFIRE says otherwise.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = observability.send_to_logfire
    if send_to_logfire is None:
        send_to_logfire = bool(observability.logfire_token)

    logfire.configure(
        token=observability.logfire_token,
        service_name="steam-login-portal",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUBBED_ATTRIBUTES),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        git_sha=settings.git_sha,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request except health probes.

    Headers are not captured because the Cookie header carries the
    session token.
    """
    logfire.instrument_fastapi(app, capture_headers=False, excluded_urls="/health")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace every statement run on the engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)


def instrument_httpx() -> None:
    """Trace the OpenID and Web API round-trips to Steam."""
    logfire.instrument_httpx()
