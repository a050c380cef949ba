from __future__ import annotations

import logging
from typing import Optional

from domain.errors import AuthError
from domain.gateways import AuthGateway
from domain.models import AuthPayload, Credentials
from domain.repositories import TokenCache

from .identity import UserIdentityProvider
from .locks import KeyedLocks

logger = logging.getLogger(__name__)


def _usable_token(payload: Optional[AuthPayload]) -> Optional[str]:
    if payload is None or payload.error is not None:
        return None
    return payload.access_token or None


class TokenAcquirer:
    """
    Returns a bearer token for a chat user.

    Resolution order:
    - a cached token;
    - a fresh sign-in with the user's backend identity;
    - a sign-up with the same credentials (first contact with the backend).

    Only one acquisition per handle runs at a time; callers that lose the
    race find the winner's token in the cache.
    """

    def __init__(
        self,
        cache: TokenCache,
        identity: UserIdentityProvider,
        gateway: AuthGateway,
    ) -> None:
        self._cache = cache
        self._identity = identity
        self._gateway = gateway
        self._locks = KeyedLocks()

    def get_token(self, handle: str) -> str:
        token = self._cache.get(handle)
        if token is not None:
            return token

        with self._locks.for_key(handle):
            token = self._cache.get(handle)
            if token is not None:
                return token

            token = self._acquire(handle)
            self._cache.put(handle, token)
            return token

    def invalidate(self, handle: str) -> None:
        self._cache.evict(handle)

    def _acquire(self, handle: str) -> str:
        user = self._identity.get_or_create(handle)
        credentials = Credentials(email=user.email, password=user.password)

        sign_in = self._gateway.sign_in(credentials)
        token = _usable_token(sign_in)
        if token is not None:
            logger.debug("Signed in %s", handle)
            return token

        logger.info(
            "Sign-in failed for %s (%s), trying sign-up",
            handle,
            sign_in.error if sign_in else "empty response",
        )
        sign_up = self._gateway.sign_up(credentials)
        token = _usable_token(sign_up)
        if token is not None:
            logger.info("Signed up %s", handle)
            return token

        if sign_up is not None and sign_up.error:
            raise AuthError(
                f"Can't sign in or sign up user {handle}: {sign_up.error}",
                handle=handle,
            )
        raise AuthError(f"Can't sign in or sign up user {handle}", handle=handle)
