"""Begin login use case."""

from pydantic import BaseModel

from portal.domain.service import IdentityVerifier


class BeginLoginResponse(BaseModel):
    """Where to send the browser to sign in at Steam."""

    redirect_url: str


class BeginLoginUseCase:
    """Use case for starting a Steam login."""

    def __init__(self, identity_verifier: IdentityVerifier) -> None:
        self.identity_verifier = identity_verifier

    async def execute(self) -> BeginLoginResponse:
        """Build the Steam login redirect.

        Raises:
            VerificationFailed: If the login URL cannot be built
        """
        redirect_url = await self.identity_verifier.begin()
        return BeginLoginResponse(redirect_url=redirect_url)
