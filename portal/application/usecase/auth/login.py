"""Login use case."""

import logfire
from pydantic import BaseModel

from portal.domain.repository import UnitOfWork
from portal.domain.service import IdentityReconciler, IdentityVerifier, SessionManager

from .common import UserProfile


class LoginRequest(BaseModel):
    """Login request from the Steam OpenID callback.

    ``params`` holds every query parameter Steam redirected back with.
    """

    params: dict[str, str]


class LoginResponse(BaseModel):
    """Login response."""

    token: str
    user: UserProfile


class LoginUseCase:
    """Use case for completing a Steam login.

    Verification, reconciliation and session creation either all take
    effect or none do.
    """

    def __init__(
        self,
        identity_verifier: IdentityVerifier,
        identity_reconciler: IdentityReconciler,
        session_manager: SessionManager,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize login use case.

        Args:
            identity_verifier: Provider verification domain service
            identity_reconciler: User record reconciliation domain service
            session_manager: Session domain service
            unit_of_work: Transaction boundary for the request
        """
        self.identity_verifier = identity_verifier
        self.identity_reconciler = identity_reconciler
        self.session_manager = session_manager
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Verify the callback with Steam (no writes happen on failure)
        2. Create or refresh the user record for the external id
        3. Establish a session for the stored record
        4. Commit; on any failure roll everything back

        Args:
            request: Login request with the callback parameters

        Returns:
            Login response with the session token and user profile

        Raises:
            VerificationFailed: If Steam does not verify the login
            StoreUnavailable: If the user record or session cannot be stored
        """
        assertion = await self.identity_verifier.verify(request.params)

        with logfire.span("login_user", external_id=assertion.external_id.root):
            try:
                user = await self.identity_reconciler.reconcile(assertion)
                token = await self.session_manager.establish(user)
                await self.unit_of_work.commit()
            except Exception as e:
                logfire.warn("Login rolled back", error=str(e))
                await self.unit_of_work.rollback()
                raise

            logfire.info(
                "User logged in",
                user_id=str(user.id),
                external_id=user.external_id.root,
            )
            return LoginResponse(token=token, user=UserProfile.from_record(user))
