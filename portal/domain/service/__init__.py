"""Domain services."""

from .identity_reconciler import IdentityReconciler
from .identity_verifier import IdentityVerifier, OpenIDClient, ProviderError
from .session_manager import SessionManager
from .user_service import UserService

__all__ = [
    "IdentityReconciler",
    "IdentityVerifier",
    "OpenIDClient",
    "ProviderError",
    "SessionManager",
    "UserService",
]
