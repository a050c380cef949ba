from __future__ import annotations

import logging
import secrets
import string

from domain.errors import IdentityError
from domain.models import BotUser, Intent
from domain.repositories import BotUserRepository

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_DOMAIN = "kbot.com"
PASSWORD_LENGTH = 8
PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()_+"


def derive_email(handle: str, domain: str = DEFAULT_EMAIL_DOMAIN) -> str:
    """Build the backend login for a chat handle: `@alice` -> `alice@<domain>`."""

    return f"{handle.replace('@', '')}@{domain}"


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


class UserIdentityProvider:
    """
    Hands out the backend identity of a chat user, registering it on first
    contact.

    The email is derived from the handle alone, so two racing first
    contacts agree on it. Which password survives is decided by the
    repository: `add_user` keeps the first stored row and the record is read
    back after inserting.
    """

    def __init__(
        self,
        user_repo: BotUserRepository,
        email_domain: str = DEFAULT_EMAIL_DOMAIN,
    ) -> None:
        self._user_repo = user_repo
        self._email_domain = email_domain

    def get_or_create(self, handle: str) -> BotUser:
        if not handle or not handle.replace("@", "").strip():
            raise IdentityError("A chat handle is required to create a backend identity.")

        existing = self._user_repo.get_by_handle(handle)
        if existing is not None:
            return existing

        user = BotUser(
            handle=handle,
            email=derive_email(handle, self._email_domain),
            password=generate_password(),
            last_intent=Intent.START,
        )
        self._user_repo.add_user(user)
        logger.info("Provisioned backend identity %s for handle %s", user.email, handle)

        stored = self._user_repo.get_by_handle(handle)
        return stored or user
