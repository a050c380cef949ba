from __future__ import annotations

from typing import Tuple

from domain.models import Intent

# Tested in order, first containment match wins.
COMMAND_PRIORITY: Tuple[Intent, ...] = (
    Intent.START,
    Intent.LOGIN,
    Intent.SIGN_UP,
    Intent.LOG_OUT,
    Intent.ADD_WORD,
    Intent.FIND_TRANSLATION,
    Intent.START_TRAINING,
    Intent.STOP_TRAINING,
    Intent.GET_RANDOM_WORD,
    Intent.ANSWER,
    Intent.HELP,
)

_TRAINING_STATES = (Intent.START_TRAINING, Intent.ANSWER)


def classify(text: str, last_intent: Intent) -> Intent:
    """
    Map a raw chat message to an intent.

    A command is recognised when its trigger appears anywhere in the text,
    so "please /add cat" is an `ADD_WORD`. Without a trigger, non-empty text
    sent during a training session is treated as an answer.
    """

    for intent in COMMAND_PRIORITY:
        if intent.trigger in text:
            return intent

    if last_intent in _TRAINING_STATES and text.strip():
        return Intent.ANSWER

    return Intent.UNKNOWN
