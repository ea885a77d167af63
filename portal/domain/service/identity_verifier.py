"""Identity verification domain service."""

from collections.abc import Mapping

import logfire

from portal.domain.error import VerificationFailed
from portal.domain.value import VerifiedAssertion


class ProviderError(Exception):
    """Identity provider rejected a login or could not be reached."""

    pass


class OpenIDClient:
    """Identity provider client interface.

    A two-step redirect protocol: ``begin_auth`` produces the provider
    URL to send the browser to, ``complete_auth`` turns the parameters
    of the provider's redirect back into a verified identity.
    """

    async def begin_auth(self, return_url: str) -> str:
        """Build the provider login URL.

        Args:
            return_url: Callback address registered with the provider

        Returns:
            URL to redirect the browser to
        """
        raise NotImplementedError

    async def complete_auth(self, params: Mapping[str, str]) -> VerifiedAssertion:
        """Verify the provider's callback parameters.

        Args:
            params: Query parameters of the provider's redirect

        Returns:
            Fully populated identity assertion

        Raises:
            ProviderError: If the provider rejects the assertion or cannot be reached
        """
        raise NotImplementedError


class IdentityVerifier:
    """Domain service turning provider callbacks into verified identities.

    All signature, nonce and replay checks are delegated to the
    provider client. This service only guarantees the all-or-nothing
    contract: a complete ``VerifiedAssertion`` or ``VerificationFailed``.
    """

    def __init__(self, client: OpenIDClient, return_url: str) -> None:
        """Initialize identity verifier.

        Args:
            client: Provider client implementation
            return_url: Callback address registered with the provider
        """
        self.client = client
        self.return_url = return_url

    async def begin(self) -> str:
        """Start a login by building the provider redirect URL.

        Returns:
            Provider login URL

        Raises:
            VerificationFailed: If the provider client cannot build the URL
        """
        with logfire.span("identity_verifier.begin", return_url=self.return_url):
            try:
                return await self.client.begin_auth(self.return_url)
            except ProviderError as e:
                logfire.error("Could not start provider login", error=str(e))
                raise VerificationFailed(str(e)) from e

    async def verify(self, params: Mapping[str, str]) -> VerifiedAssertion:
        """Verify callback parameters with the provider.

        Args:
            params: Query parameters of the provider's redirect

        Returns:
            Verified assertion for this login attempt

        Raises:
            VerificationFailed: If the provider rejects the callback, the
                parameters are malformed, or the round-trip fails or times out
        """
        with logfire.span("identity_verifier.verify"):
            if not params:
                logfire.warn("Empty provider callback")
                raise VerificationFailed("Callback carried no provider parameters")

            try:
                assertion = await self.client.complete_auth(params)
            except ProviderError as e:
                logfire.warn("Provider verification failed", error=str(e))
                raise VerificationFailed(str(e)) from e

            logfire.info(
                "Identity verified",
                external_id=assertion.external_id.root,
                display_name=assertion.display_name,
            )
            return assertion
