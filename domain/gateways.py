from __future__ import annotations

from typing import Optional, Protocol

from .models import AuthPayload, Credentials, SuccessResponse, TrainingSession


class AuthGateway(Protocol):
    """Unauthenticated backend operations used to obtain a bearer token."""

    def sign_in(self, credentials: Credentials) -> AuthPayload:
        ...

    def sign_up(self, credentials: Credentials) -> AuthPayload:
        ...


class DictionaryGateway(AuthGateway, Protocol):
    """
    The full set of backend operations the bot uses.

    User-scoped operations receive the bearer token explicitly; obtaining it
    is the application layer's concern.
    """

    def add_word(
        self, token: str, word: str, translation: Optional[str] = None
    ) -> SuccessResponse:
        ...

    def get_translation(self, token: str, word: str) -> SuccessResponse:
        ...

    def start_training(self, token: str) -> TrainingSession:
        ...

    def submit_answer(self, token: str, answer: str) -> TrainingSession:
        ...

    def stop_training(self, token: str) -> SuccessResponse:
        ...

    def get_random_translation(self, token: str) -> Optional[str]:
        ...
