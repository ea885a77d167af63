"""Unit tests for IdentityVerifier."""

import pytest

from portal.adapter.steam import MockSteamOpenIDClient, SteamOpenIDError
from portal.domain.error import VerificationFailed
from portal.domain.service import IdentityVerifier, OpenIDClient

RETURN_URL = "http://localhost:8000/auth/steam/return"


class RejectingClient(OpenIDClient):
    """Provider client that rejects every step."""

    async def begin_auth(self, return_url):
        raise SteamOpenIDError("endpoint discovery failed")

    async def complete_auth(self, params):
        raise SteamOpenIDError("Steam rejected the assertion")


class RecordingClient(MockSteamOpenIDClient):
    """Mock client remembering what it was asked."""

    def __init__(self):
        super().__init__()
        self.return_urls: list[str] = []

    async def begin_auth(self, return_url):
        self.return_urls.append(return_url)
        return await super().begin_auth(return_url)


class TestBegin:
    """Tests for IdentityVerifier.begin()."""

    @pytest.mark.asyncio
    async def test_uses_configured_return_url(self):
        client = RecordingClient()
        verifier = IdentityVerifier(client, RETURN_URL)

        url = await verifier.begin()

        assert client.return_urls == [RETURN_URL]
        assert "mock=true" in url

    @pytest.mark.asyncio
    async def test_provider_error_becomes_verification_failed(self):
        verifier = IdentityVerifier(RejectingClient(), RETURN_URL)

        with pytest.raises(VerificationFailed, match="discovery"):
            await verifier.begin()


class TestVerify:
    """Tests for IdentityVerifier.verify()."""

    @pytest.mark.asyncio
    async def test_returns_assertion_from_provider(self):
        verifier = IdentityVerifier(MockSteamOpenIDClient(), RETURN_URL)

        assertion = await verifier.verify(
            {"openid.claimed_id": "https://steamcommunity.com/openid/id/76561198000000001"}
        )

        assert assertion.external_id.root == "76561198000000001"
        assert assertion.display_name

    @pytest.mark.asyncio
    async def test_provider_rejection_becomes_verification_failed(self):
        """Provider errors must not leak as adapter exceptions."""
        verifier = IdentityVerifier(RejectingClient(), RETURN_URL)

        with pytest.raises(VerificationFailed) as exc_info:
            await verifier.verify({"openid.mode": "id_res"})

        assert isinstance(exc_info.value.__cause__, SteamOpenIDError)

    @pytest.mark.asyncio
    async def test_empty_callback_is_rejected(self):
        """A callback with no parameters cannot be verified."""
        verifier = IdentityVerifier(MockSteamOpenIDClient(), RETURN_URL)

        with pytest.raises(VerificationFailed):
            await verifier.verify({})
