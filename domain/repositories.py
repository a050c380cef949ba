from __future__ import annotations

from typing import Optional, Protocol

from .models import BotUser, Intent


class BotUserRepository(Protocol):
    """
    Abstraction over bot user persistence.

    Implementations are responsible for:
    - Mapping between database rows and the `BotUser` domain model.
    - Encoding the password on write and decoding it on read, so the
      application layer only ever sees plaintext.
    - Enforcing uniqueness of the handle.
    """

    def get_by_handle(self, handle: str) -> Optional[BotUser]:
        """Return the user with the given handle, or None if not found."""

        ...

    def add_user(self, user: BotUser) -> None:
        """
        Persist a new user.

        If a user with the same handle already exists the call is a no-op;
        the stored row wins.
        """

        ...

    def update_last_intent(self, handle: str, intent: Intent) -> None:
        """Record the most recently classified intent of a user."""

        ...


class TokenCache(Protocol):
    """
    Bearer tokens keyed by handle.

    Entries expire according to the implementation's eviction policy.
    Implementations must be safe for concurrent use; they do not need to
    guard the miss-then-populate sequence, which is the caller's job.
    """

    def get(self, handle: str) -> Optional[str]:
        ...

    def put(self, handle: str, token: str) -> None:
        ...

    def evict(self, handle: str) -> None:
        ...
