"""Application layer DI providers."""

from dishka import Scope, provide

from portal.application.usecase.auth import (
    BeginLoginUseCase,
    GetCurrentUserUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
)
from portal.application.usecase.user import RemoveUserUseCase
from portal.domain.repository import UnitOfWork
from portal.domain.service import (
    IdentityReconciler,
    IdentityVerifier,
    SessionManager,
    UserService,
)
from portal.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_begin_login_use_case(
        self, identity_verifier: IdentityVerifier
    ) -> BeginLoginUseCase:
        """Provide begin login use case."""
        return BeginLoginUseCase(identity_verifier=identity_verifier)

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        identity_verifier: IdentityVerifier,
        identity_reconciler: IdentityReconciler,
        session_manager: SessionManager,
        unit_of_work: UnitOfWork,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            identity_verifier=identity_verifier,
            identity_reconciler=identity_reconciler,
            session_manager=session_manager,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            session_manager=session_manager, unit_of_work=unit_of_work
        )

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase(session_manager=session_manager, unit_of_work=unit_of_work)

    @provide(scope=Scope.REQUEST)
    def get_refresh_session_use_case(
        self, session_manager: SessionManager, unit_of_work: UnitOfWork
    ) -> RefreshSessionUseCase:
        """Provide refresh session use case."""
        return RefreshSessionUseCase(
            session_manager=session_manager, unit_of_work=unit_of_work
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_remove_user_use_case(
        self, user_service: UserService, unit_of_work: UnitOfWork
    ) -> RemoveUserUseCase:
        """Provide remove user use case."""
        return RemoveUserUseCase(user_service=user_service, unit_of_work=unit_of_work)
