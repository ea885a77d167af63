"""Domain layer DI providers."""

from dishka import Scope, provide

from portal.adapter.steam import SteamOpenIDClient
from portal.config import AuthSettings, SteamSettings
from portal.domain.repository import SessionRepository, UserRepository
from portal.domain.service import (
    IdentityReconciler,
    IdentityVerifier,
    SessionManager,
    UserService,
)
from portal.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_verifier(
        self, client: SteamOpenIDClient, steam: SteamSettings
    ) -> IdentityVerifier:
        """Provide identity verifier bound to the Steam client."""
        return IdentityVerifier(client=client, return_url=steam.return_url)

    @provide
    def get_identity_reconciler(
        self, user_repository: UserRepository
    ) -> IdentityReconciler:
        """Provide identity reconciler."""
        return IdentityReconciler(user_repository=user_repository)

    @provide
    def get_session_manager(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        auth_settings: AuthSettings,
    ) -> SessionManager:
        """Provide session manager."""
        return SessionManager(
            session_repository=session_repository,
            user_repository=user_repository,
            auth_settings=auth_settings,
        )

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository, session_repository=session_repository
        )
