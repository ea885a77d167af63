"""Test configuration and fixtures."""

import logfire

# Keep spans local: nothing is exported or printed during tests
logfire.configure(send_to_logfire=False, console=False)
