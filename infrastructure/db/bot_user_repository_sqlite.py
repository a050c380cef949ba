from __future__ import annotations

import sqlite3
from typing import Optional

from domain.models import BotUser, Intent
from domain.repositories import BotUserRepository

from .password_codec import decode_password, encode_password


class SqliteBotUserRepository(BotUserRepository):
    """
    SQLite-backed implementation of `BotUserRepository`.

    This repository owns the `bot_users` table and maps rows to the
    `BotUser` domain model. It is self-initialising: the table is created
    if needed.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS bot_users (
                    handle TEXT PRIMARY KEY,
                    email TEXT NOT NULL,
                    encoded_password TEXT NOT NULL,
                    last_intent TEXT NOT NULL
                )
                """
            )
            conn.commit()

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> BotUser:
        return BotUser(
            handle=row[0],
            email=row[1],
            password=decode_password(row[2]),
            last_intent=Intent[row[3]],
        )

    def get_by_handle(self, handle: str) -> Optional[BotUser]:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT handle, email, encoded_password, last_intent
                FROM bot_users
                WHERE handle = ?
                """,
                (handle,),
            )
            row = cur.fetchone()
            if not row:
                return None
            return self._to_domain(row)

    def add_user(self, user: BotUser) -> None:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT OR IGNORE INTO bot_users (handle, email, encoded_password, last_intent)
                VALUES (?, ?, ?, ?)
                """,
                (
                    user.handle,
                    user.email,
                    encode_password(user.password),
                    user.last_intent.name,
                ),
            )
            conn.commit()

    def update_last_intent(self, handle: str, intent: Intent) -> None:
        with self._get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                "UPDATE bot_users SET last_intent = ? WHERE handle = ?",
                (intent.name, handle),
            )
            conn.commit()
