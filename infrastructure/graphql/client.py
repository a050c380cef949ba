"""
GraphQL-over-HTTP client for the Kalimeros dictionary API.

Every operation is a single POST of `{"query", "variables"}`; user-scoped
operations carry the caller's bearer token. Responses are union types, so
the fields present in the payload decide which arm of the result object is
filled in.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from domain.errors import RemoteOperationError, TokenRejectedError, TransportError
from domain.models import AuthPayload, Credentials, SuccessResponse, TrainingSession

from . import documents

logger = logging.getLogger(__name__)


def _to_auth_payload(raw: Any) -> AuthPayload:
    raw = raw if isinstance(raw, dict) else {}
    return AuthPayload(
        access_token=raw.get("accessToken"),
        refresh_token=raw.get("refreshToken"),
        expires_in=int(raw.get("expiresIn") or 0),
        error=raw.get("error"),
    )


def _to_success_response(raw: Any) -> SuccessResponse:
    raw = raw if isinstance(raw, dict) else {}
    return SuccessResponse(message=raw.get("message"), error=raw.get("error"))


def _to_training_session(raw: Any) -> TrainingSession:
    raw = raw if isinstance(raw, dict) else {}
    return TrainingSession(
        word=raw.get("word"),
        completed=int(raw.get("completed") or 0),
        total=int(raw.get("total") or 0),
        message=raw.get("message"),
        error=raw.get("error"),
    )


class GraphQLApiClient:
    """Implements `DictionaryGateway` on top of `httpx.Client`."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._url = url
        self._client = http_client or httpx.Client(timeout=timeout)

    def sign_in(self, credentials: Credentials) -> AuthPayload:
        raw = self._execute(
            "signIn", documents.SIGN_IN, {"credentials": self._credentials(credentials)}
        )
        return _to_auth_payload(raw)

    def sign_up(self, credentials: Credentials) -> AuthPayload:
        raw = self._execute(
            "signUp", documents.SIGN_UP, {"credentials": self._credentials(credentials)}
        )
        return _to_auth_payload(raw)

    def add_word(
        self, token: str, word: str, translation: Optional[str] = None
    ) -> SuccessResponse:
        new_word = {"word": word, "translation": translation}
        raw = self._execute("addWord", documents.ADD_WORD, {"newWord": new_word}, token)
        return _to_success_response(raw)

    def get_translation(self, token: str, word: str) -> SuccessResponse:
        raw = self._execute("getTranslation", documents.GET_TRANSLATION, {"word": word}, token)
        return _to_success_response(raw)

    def start_training(self, token: str) -> TrainingSession:
        raw = self._execute("startTraining", documents.START_TRAINING, None, token)
        return _to_training_session(raw)

    def submit_answer(self, token: str, answer: str) -> TrainingSession:
        raw = self._execute("submitAnswer", documents.SUBMIT_ANSWER, {"answer": answer}, token)
        return _to_training_session(raw)

    def stop_training(self, token: str) -> SuccessResponse:
        raw = self._execute("stopTraining", documents.STOP_TRAINING, None, token)
        return _to_success_response(raw)

    def get_random_translation(self, token: str) -> Optional[str]:
        raw = self._execute(
            "getRandomTranslation", documents.GET_RANDOM_TRANSLATION, None, token
        )
        return None if raw is None else str(raw)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GraphQLApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _credentials(credentials: Credentials) -> Dict[str, str]:
        return {"email": credentials.email, "password": credentials.password}

    def _execute(
        self,
        operation: str,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        """Send one operation and return the value of its root field."""

        payload: Dict[str, Any] = {"query": document}
        if variables:
            payload["variables"] = variables

        headers = {}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._client.post(self._url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"{operation} request failed: {exc}", operation=operation) from exc

        if response.status_code == 401:
            raise TokenRejectedError(
                f"{operation} rejected the bearer token",
                status_code=response.status_code,
                operation=operation,
            )
        if response.status_code != 200:
            raise TransportError(
                f"{operation} returned HTTP {response.status_code}",
                status_code=response.status_code,
                operation=operation,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                f"{operation} returned invalid JSON",
                status_code=response.status_code,
                operation=operation,
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(
                f"{operation} returned a malformed response",
                status_code=response.status_code,
                operation=operation,
            )

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            message = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise RemoteOperationError(message, operation=operation)

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise TransportError(
                f"{operation} returned a malformed response",
                status_code=response.status_code,
                operation=operation,
            )
        logger.debug("%s completed", operation)
        return data.get(operation)
