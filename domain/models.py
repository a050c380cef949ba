from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Intent(Enum):
    """
    Classified meaning of an inbound message.

    The value of each member is the literal command trigger that selects it.
    `UNKNOWN` has no trigger.
    """

    START = "/start"
    SIGN_UP = "/signup"
    LOGIN = "/login"
    LOG_OUT = "/logout"
    ADD_WORD = "/add"
    FIND_TRANSLATION = "/translate"
    START_TRAINING = "/training"
    ANSWER = "/answer"
    STOP_TRAINING = "/stop"
    GET_RANDOM_WORD = "/random"
    HELP = "/help"
    UNKNOWN = ""

    @property
    def trigger(self) -> str:
        return self.value


@dataclass
class BotUser:
    """
    A chat user together with the backend identity provisioned for them.

    `password` holds the plaintext password when the object is handed to
    callers; repositories store it encoded.
    """

    handle: str
    email: str
    password: str
    last_intent: Intent = Intent.START


@dataclass
class Credentials:
    email: str
    password: str


@dataclass
class AuthPayload:
    """Result of `signIn` / `signUp`: either a token triple or an error."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: int = 0
    error: Optional[str] = None


@dataclass
class SuccessResponse:
    message: Optional[str] = None
    error: Optional[str] = None


@dataclass
class TrainingSession:
    """
    Result of `startTraining` / `submitAnswer`.

    The backend answers with the next word of the session, a plain message
    (e.g. when the session is finished) or an error.
    """

    word: Optional[str] = None
    completed: int = 0
    total: int = 0
    message: Optional[str] = None
    error: Optional[str] = None


@dataclass
class IncomingMessage:
    chat_id: int
    handle: Optional[str]
    text: str


@dataclass
class CallbackAction:
    chat_id: int
    handle: Optional[str]
    action_id: str


@dataclass
class ReplyButton:
    label: str
    action_id: str


@dataclass
class OutgoingMessage:
    """A reply for the transport, optionally carrying rows of buttons."""

    chat_id: int
    text: str
    buttons: List[List[ReplyButton]] = field(default_factory=list)
    parse_mode: Optional[str] = None
