"""Strongly typed identifiers for portal domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
SessionId = NewType("SessionId", UUID)

# Signed, client-held reference to a server-side session
SessionToken = NewType("SessionToken", str)
