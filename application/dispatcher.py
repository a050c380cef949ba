from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from domain.errors import AuthError, IdentityError, RemoteOperationError, TransportError
from domain.models import (
    CallbackAction,
    IncomingMessage,
    Intent,
    OutgoingMessage,
    SuccessResponse,
    TrainingSession,
)
from domain.repositories import BotUserRepository

from .actions import help_menu, parse_menu_action
from .classifier import classify
from .identity import UserIdentityProvider
from .locks import KeyedLocks
from .remote_operations import RemoteOperationClient
from .tokens import TokenAcquirer

logger = logging.getLogger(__name__)

TRY_AGAIN = "Please try again later."
NO_ANSWER = "No answer"

HELP_TEXT = (
    "Available commands: \n"
    "<b>/add word translation</b> - add word with translation to dictionary, "
    "only word as parameter is possible\n"
    "<b>/translate word</b> - find translation for word\n"
    "<b>/training</b> - start daily training based on your word list\n"
    "<b>/stop</b> - stop training\n"
    "<b>/random</b> - get random word for translation\n"
    "<b>/login</b> - open a session with the dictionary service\n"
    "<b>/logout</b> - close the current session\n"
)


def _render_session(session: Optional[TrainingSession]) -> str:
    if session is None:
        return NO_ANSWER
    if session.error:
        return f"Training is not available: {session.error}"
    if session.message:
        return session.message
    if session.word:
        return (
            f"Please, write translation of this word {session.word} in replies\n"
            f"Progress: {session.completed}/{session.total}"
        )
    return NO_ANSWER


def _render_response(response: Optional[SuccessResponse], failure: str) -> str:
    if response is None:
        return NO_ANSWER
    if response.error:
        return f"{failure}: {response.error}"
    return response.message or NO_ANSWER


def _strip_trigger(text: str, intent: Intent) -> str:
    return text.replace(intent.trigger, "").strip()


def _arguments_after(text: str, intent: Intent) -> List[str]:
    """Whitespace-separated words following the first occurrence of the trigger."""

    _, _, rest = text.partition(intent.trigger)
    return rest.split()


class Dispatcher:
    """
    Turns chat input into replies, one state machine per chat user.

    The state is the user's last intent. Every handled message moves the
    user to the intent it was classified as, whether or not the backend
    call behind it succeeded. Calls for the same user are serialised.
    """

    def __init__(
        self,
        user_repo: BotUserRepository,
        identity: UserIdentityProvider,
        tokens: TokenAcquirer,
        remote: RemoteOperationClient,
    ) -> None:
        self._user_repo = user_repo
        self._identity = identity
        self._tokens = tokens
        self._remote = remote
        self._locks = KeyedLocks()
        self._handlers: Dict[Intent, Callable[[int, str, str], OutgoingMessage]] = {
            Intent.START: self._start,
            Intent.LOGIN: self._login,
            Intent.SIGN_UP: self._login,
            Intent.LOG_OUT: self._log_out,
            Intent.ADD_WORD: self._add_word,
            Intent.FIND_TRANSLATION: self._find_translation,
            Intent.START_TRAINING: self._start_training,
            Intent.ANSWER: self._submit_answer,
            Intent.STOP_TRAINING: self._stop_training,
            Intent.GET_RANDOM_WORD: self._random_word,
            Intent.HELP: self._help,
            Intent.UNKNOWN: self._unknown,
        }

    def handle_message(self, message: IncomingMessage) -> OutgoingMessage:
        handle = message.handle or ""
        with self._locks.for_key(handle):
            try:
                user = self._identity.get_or_create(handle)
            except IdentityError:
                return OutgoingMessage(
                    message.chat_id,
                    "Please set a username in your profile settings, it is used to "
                    "create your dictionary account.",
                )

            intent = classify(message.text, user.last_intent)
            logger.debug("Message from %s classified as %s", handle, intent.name)
            return self._dispatch(message.chat_id, handle, intent, message.text)

    def handle_callback(self, action: CallbackAction) -> OutgoingMessage:
        intent = parse_menu_action(action.action_id)
        if intent is None:
            logger.warning("Unknown action %r from %s", action.action_id, action.handle)
            return OutgoingMessage(action.chat_id, "This button is no longer supported.")

        handle = action.handle or ""
        with self._locks.for_key(handle):
            try:
                self._identity.get_or_create(handle)
            except IdentityError:
                return OutgoingMessage(
                    action.chat_id, "Please set a username in your profile settings."
                )
            return self._dispatch(action.chat_id, handle, intent, "")

    def _dispatch(self, chat_id: int, handle: str, intent: Intent, text: str) -> OutgoingMessage:
        handler = self._handlers[intent]
        try:
            reply = handler(chat_id, handle, text)
        except AuthError:
            logger.error("Authentication failed for %s", handle, exc_info=True)
            reply = OutgoingMessage(
                chat_id, f"Could not sign you in to the dictionary service. {TRY_AGAIN}"
            )
        except RemoteOperationError as exc:
            logger.warning("Backend rejected %s for %s: %s", exc.operation, handle, exc)
            reply = OutgoingMessage(
                chat_id, f"The dictionary service could not process the request. {TRY_AGAIN}"
            )
        except TransportError:
            logger.error("Error during processing message from %s", handle, exc_info=True)
            reply = OutgoingMessage(
                chat_id, f"The dictionary service is not reachable right now. {TRY_AGAIN}"
            )

        self._user_repo.update_last_intent(handle, intent)
        return reply

    def _start(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        return OutgoingMessage(chat_id, f"Hi {handle} and yeah! Kalimeros Bot was started!")

    def _login(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        self._tokens.get_token(handle)
        return OutgoingMessage(chat_id, "You are signed in to the dictionary service.")

    def _log_out(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        self._tokens.invalidate(handle)
        return OutgoingMessage(
            chat_id, "Session closed. A new one will be opened with your next command."
        )

    def _add_word(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        params = _arguments_after(text, Intent.ADD_WORD)
        if not params:
            return OutgoingMessage(chat_id, "Please provide word or word and translation")

        word = params[0]
        translation = " ".join(params[1:]) or None
        response = self._remote.add_word(handle, word, translation)
        if response is not None and response.error:
            return OutgoingMessage(chat_id, f"The word was not added: {response.error}")
        return OutgoingMessage(chat_id, "Done\n")

    def _find_translation(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        word_or_phrase = " ".join(_arguments_after(text, Intent.FIND_TRANSLATION))
        if not word_or_phrase:
            return OutgoingMessage(chat_id, "Please provide word for translation")

        response = self._remote.get_translation(handle, word_or_phrase)
        return OutgoingMessage(chat_id, _render_response(response, "No translation found"))

    def _start_training(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        return OutgoingMessage(chat_id, _render_session(self._remote.start_training(handle)))

    def _submit_answer(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        answer = _strip_trigger(text, Intent.ANSWER)
        if not answer:
            return OutgoingMessage(chat_id, "Please write the translation of the word")
        return OutgoingMessage(chat_id, _render_session(self._remote.submit_answer(handle, answer)))

    def _stop_training(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        response = self._remote.stop_training(handle)
        if response is not None and response.error:
            return OutgoingMessage(chat_id, f"Training was not stopped: {response.error}")
        return OutgoingMessage(chat_id, "Training stopped" if response is not None else NO_ANSWER)

    def _random_word(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        return OutgoingMessage(chat_id, self._remote.get_random_translation(handle) or NO_ANSWER)

    def _help(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        return OutgoingMessage(chat_id, HELP_TEXT, buttons=help_menu(), parse_mode="HTML")

    def _unknown(self, chat_id: int, handle: str, text: str) -> OutgoingMessage:
        return OutgoingMessage(
            chat_id, "Unknown or not implemented command. Type /help to see available commands."
        )
