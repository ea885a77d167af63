#!/usr/bin/env python3
"""Remove a user record and revoke all of its sessions.

Usage:
    python scripts/remove_user.py 76561197960287930
"""

import argparse
import asyncio
import sys

import logfire

from portal.application.usecase.user import RemoveUserUseCase
from portal.application.usecase.user.remove_user import RemoveUserRequest
from portal.config import Settings
from portal.domain.error import NotFoundError, StoreUnavailable
from portal.util.di.container import create_container
from portal.util.logging import setup_logging
from portal.util.observability import configure_logfire


async def remove_user(external_id: str) -> int:
    """Run the removal inside a request scope of the production container."""
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(RemoveUserUseCase)
            try:
                response = await use_case.execute(
                    RemoveUserRequest(external_id=external_id)
                )
            except NotFoundError:
                logfire.warn("No user record to remove", external_id=external_id)
                print(f"No user record for external id {external_id}", file=sys.stderr)
                return 1
            except StoreUnavailable as e:
                logfire.error("User removal failed", external_id=external_id, error=str(e))
                print(f"Store unavailable: {e}", file=sys.stderr)
                return 2
    finally:
        await container.close()

    print(
        f"Removed user {response.external_id} "
        f"and revoked {response.sessions_revoked} session(s)"
    )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("external_id", help="Steam 64-bit id of the user to remove")
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    return asyncio.run(remove_user(args.external_id))


if __name__ == "__main__":
    sys.exit(main())
