from __future__ import annotations

import logging
from typing import Optional

import requests
import telebot
from telebot.apihelper import ApiException
from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup

from application.dispatcher import Dispatcher
from domain.errors import DeliveryError
from domain.models import CallbackAction, IncomingMessage, OutgoingMessage

logger = logging.getLogger(__name__)

FAILURE_TEXT = "Error during processing message. Please try again later"


def _handle_of(user) -> str:
    """
    Stable handle for a Telegram user.

    The public username is preferred; users without one are addressed by
    their numeric id, with a dash so the result can never be a username.
    """

    if user is None:
        return ""
    return user.username or f"id-{user.id}"


def _build_markup(reply: OutgoingMessage) -> Optional[InlineKeyboardMarkup]:
    if not reply.buttons:
        return None

    markup = InlineKeyboardMarkup()
    for row in reply.buttons:
        markup.row(
            *[
                InlineKeyboardButton(button.label, callback_data=button.action_id)
                for button in row
            ]
        )
    return markup


def create_telegram_bot(
    bot_token: str,
    dispatcher: Dispatcher,
    num_threads: int = 4,
) -> telebot.TeleBot:
    """
    Configure and return a TeleBot instance wired to the dispatcher.

    This module contains only Telegram-specific concerns: turning Telegram
    messages/callbacks into dispatcher input and sending the replies back.
    Updates are handled on TeleBot's worker pool, so a slow backend call
    only delays the user who made it.
    """

    bot = telebot.TeleBot(bot_token, threaded=True, num_threads=num_threads)

    def deliver(reply: OutgoingMessage) -> None:
        try:
            bot.send_message(
                reply.chat_id,
                reply.text,
                reply_markup=_build_markup(reply),
                parse_mode=reply.parse_mode,
            )
        except (ApiException, requests.RequestException) as exc:
            raise DeliveryError(f"Could not deliver reply to chat {reply.chat_id}") from exc

    def send_reply(reply: OutgoingMessage) -> None:
        try:
            deliver(reply)
        except DeliveryError:
            logger.error("Error during sending message %s", reply.chat_id, exc_info=True)

    @bot.message_handler(content_types=["text"])
    def handle_text(message):
        text = message.text or ""
        if not text.strip():
            return

        incoming = IncomingMessage(
            chat_id=message.chat.id,
            handle=_handle_of(message.from_user),
            text=text,
        )
        try:
            reply = dispatcher.handle_message(incoming)
        except Exception:  # Nothing may crash the polling worker.
            logger.exception("Error during processing message from %s", incoming.handle)
            reply = OutgoingMessage(incoming.chat_id, FAILURE_TEXT)
        send_reply(reply)

    @bot.callback_query_handler(func=lambda call: bool(call.data))
    def handle_callback(call):
        try:
            bot.answer_callback_query(call.id)
        except (ApiException, requests.RequestException):
            logger.warning("Could not acknowledge callback %s", call.id, exc_info=True)

        action = CallbackAction(
            chat_id=call.message.chat.id,
            handle=_handle_of(call.from_user),
            action_id=call.data,
        )
        try:
            reply = dispatcher.handle_callback(action)
        except Exception:  # Nothing may crash the polling worker.
            logger.exception("Error during processing action from %s", action.handle)
            reply = OutgoingMessage(action.chat_id, FAILURE_TEXT)
        send_reply(reply)

    return bot
