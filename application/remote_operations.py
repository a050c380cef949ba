from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from domain.errors import KalimerosError, TokenRejectedError
from domain.gateways import DictionaryGateway
from domain.models import SuccessResponse, TrainingSession

from .tokens import TokenAcquirer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RemoteOperationClient:
    """
    User-scoped backend operations, addressed by chat handle.

    Each call fetches the user's bearer token and performs exactly one
    request. A token the backend refuses is evicted so the next call signs
    in again; the failing call itself is not retried.
    """

    def __init__(self, gateway: DictionaryGateway, tokens: TokenAcquirer) -> None:
        self._gateway = gateway
        self._tokens = tokens

    def add_word(
        self, handle: str, word: str, translation: Optional[str] = None
    ) -> SuccessResponse:
        return self._call(
            "addWord",
            handle,
            lambda token: self._gateway.add_word(token, word, translation),
        )

    def get_translation(self, handle: str, text: str) -> SuccessResponse:
        return self._call(
            "getTranslation",
            handle,
            lambda token: self._gateway.get_translation(token, text),
        )

    def start_training(self, handle: str) -> TrainingSession:
        return self._call("startTraining", handle, self._gateway.start_training)

    def submit_answer(self, handle: str, text: str) -> TrainingSession:
        return self._call(
            "submitAnswer",
            handle,
            lambda token: self._gateway.submit_answer(token, text),
        )

    def stop_training(self, handle: str) -> SuccessResponse:
        return self._call("stopTraining", handle, self._gateway.stop_training)

    def get_random_translation(self, handle: str) -> Optional[str]:
        return self._call(
            "getRandomTranslation", handle, self._gateway.get_random_translation
        )

    def _call(self, operation: str, handle: str, request: Callable[[str], T]) -> T:
        token = self._tokens.get_token(handle)
        try:
            return request(token)
        except TokenRejectedError:
            logger.warning("Token of %s rejected during %s, evicting", handle, operation)
            self._tokens.invalidate(handle)
            raise
        except KalimerosError:
            logger.error("Error during %s for %s", operation, handle, exc_info=True)
            raise
