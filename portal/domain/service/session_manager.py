"""Session lifecycle domain service."""

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID, uuid4

import logfire

from portal.config import AuthSettings
from portal.domain.error import SessionCorrupted, StoreUnavailable
from portal.domain.model import Session, Unauthenticated, UserRecord
from portal.domain.repository import SessionRepository, UserRepository
from portal.domain.value import (
    ExternalId,
    SessionId,
    SessionToken,
    UnauthenticatedReason,
)
from portal.util.jwt import (
    ExpiredTokenError,
    JWTError,
    SessionTokenPayload,
    create_token,
    verify_token,
)

from .identity_reconciler import utc_now


class SessionManager:
    """Domain service for establishing, resolving and revoking sessions.

    The token handed to the client names only the external id and the
    server-side session. Every resolve reloads the user record, so
    profile changes and removals take effect on the next request.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        user_repository: UserRepository,
        auth_settings: AuthSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize session manager.

        Args:
            session_repository: Session backend
            user_repository: User record repository
            auth_settings: Authentication settings (secret, TTL)
            clock: Source of the current time (timezone-aware)
        """
        self.session_repository = session_repository
        self.user_repository = user_repository
        self.auth_settings = auth_settings
        self.clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(days=self.auth_settings.session_ttl_days)

    async def establish(self, user: UserRecord) -> SessionToken:
        """Open a session for a reconciled user.

        Args:
            user: The stored user record

        Returns:
            Signed token referencing the new session

        Raises:
            StoreUnavailable: If the session cannot be stored
        """
        with logfire.span(
            "session_manager.establish", external_id=user.external_id.root
        ):
            now = self.clock()
            session = Session(
                id=SessionId(uuid4()),
                external_id=user.external_id,
                created_at=now,
                expires_at=now + self.ttl,
            )
            await self.session_repository.save(session)

            logfire.info(
                "Session established",
                session_id=str(session.id),
                external_id=user.external_id.root,
            )
            return self._sign(session)

    async def resolve(self, token: str | None) -> UserRecord | Unauthenticated:
        """Resolve a session token to the current user record.

        Never raises: every failure mode degrades to ``Unauthenticated``.

        Args:
            token: Token from the session cookie (optional)

        Returns:
            The current user record, or Unauthenticated with the reason
        """
        with logfire.span("session_manager.resolve"):
            payload = self._accept(token)
            if isinstance(payload, Unauthenticated):
                return payload

            try:
                return await self._load(payload)
            except StoreUnavailable as e:
                logfire.error("Session store unavailable during resolve", error=str(e))
                return Unauthenticated(reason=UnauthenticatedReason.STORE_UNAVAILABLE)

    async def invalidate(self, token: str | None) -> None:
        """Revoke the session behind a token.

        Idempotent: missing, expired, corrupted or already revoked
        tokens are a no-op.

        Args:
            token: Token from the session cookie (optional)

        Raises:
            StoreUnavailable: If the session store cannot be reached
        """
        if not token:
            return

        with logfire.span("session_manager.invalidate"):
            try:
                payload = self._decode(token, verify_exp=False)
            except SessionCorrupted:
                logfire.debug("Ignoring corrupted token on invalidate")
                return

            await self.session_repository.delete(self._session_id(payload))
            logfire.info(
                "Session invalidated", session_id=payload.sid, external_id=payload.sub
            )

    async def renew(self, token: str | None) -> SessionToken | Unauthenticated:
        """Extend a valid session and issue a fresh token for it.

        The token is decoded once, up front. Its expiry is not checked
        again while the session is extended.

        Args:
            token: Token from the session cookie (optional)

        Returns:
            New token for the same session, or Unauthenticated if the
            token does not currently resolve

        Raises:
            StoreUnavailable: If the session store cannot be reached
        """
        with logfire.span("session_manager.renew"):
            payload = self._accept(token)
            if isinstance(payload, Unauthenticated):
                return payload

            resolved = await self._load(payload)
            if isinstance(resolved, Unauthenticated):
                return resolved

            session = await self.session_repository.find_by_id(
                self._session_id(payload)
            )
            if session is None:
                # Revoked between the lookup and the extension
                return Unauthenticated(reason=UnauthenticatedReason.REVOKED)

            extended = session.model_copy(
                update={"expires_at": self.clock() + self.ttl}
            )
            await self.session_repository.save(extended)

            logfire.info(
                "Session renewed",
                session_id=str(extended.id),
                external_id=resolved.external_id.root,
                expires_at=extended.expires_at.isoformat(),
            )
            return self._sign(extended)

    def _accept(self, token: str | None) -> SessionTokenPayload | Unauthenticated:
        """Decode a client token, mapping every rejection to a reason."""
        if not token:
            return Unauthenticated(reason=UnauthenticatedReason.NO_SESSION)

        try:
            return self._decode(token)
        except ExpiredTokenError:
            logfire.debug("Session token expired")
            return Unauthenticated(reason=UnauthenticatedReason.EXPIRED)
        except SessionCorrupted as e:
            logfire.warn("Session token rejected", error=str(e))
            return Unauthenticated(reason=UnauthenticatedReason.CORRUPTED)

    async def _load(self, payload: SessionTokenPayload) -> UserRecord | Unauthenticated:
        """Check the server-side session and reload the user it belongs to."""
        session_id = self._session_id(payload)
        external_id = ExternalId(payload.sub)

        session = await self.session_repository.find_by_id(session_id)
        if session is None or session.external_id != external_id:
            logfire.info("Session revoked or unknown", session_id=payload.sid)
            return Unauthenticated(reason=UnauthenticatedReason.REVOKED)

        if session.is_expired(self.clock()):
            await self.session_repository.delete(session.id)
            logfire.info("Session expired", session_id=payload.sid)
            return Unauthenticated(reason=UnauthenticatedReason.EXPIRED)

        user = await self.user_repository.find_by_external_id(external_id)
        if user is None:
            # Record removed administratively: the session is dangling
            await self.session_repository.delete_all_for_external_id(external_id)
            logfire.warn(
                "Session references a removed user", external_id=external_id.root
            )
            return Unauthenticated(reason=UnauthenticatedReason.USER_REMOVED)

        return user

    def _sign(self, session: Session) -> SessionToken:
        return SessionToken(
            create_token(
                external_id=session.external_id.root,
                session_id=str(session.id),
                expires_at=session.expires_at,
                settings=self.auth_settings,
            )
        )

    def _decode(self, token: str, verify_exp: bool = True) -> SessionTokenPayload:
        """Verify a token's signature and claims.

        Raises:
            ExpiredTokenError: If the token has expired
            SessionCorrupted: If the token is unparseable or tampered with
        """
        try:
            payload = verify_token(token, self.auth_settings, verify_exp=verify_exp)
            self._session_id(payload)
            ExternalId(payload.sub)
        except ExpiredTokenError:
            raise
        except (JWTError, ValueError) as e:
            raise SessionCorrupted(str(e)) from e
        return payload

    @staticmethod
    def _session_id(payload: SessionTokenPayload) -> SessionId:
        return SessionId(UUID(payload.sid))
