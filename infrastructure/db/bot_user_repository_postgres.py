from __future__ import annotations

from typing import Optional

import psycopg2

from domain.models import BotUser, Intent
from domain.repositories import BotUserRepository

from .password_codec import decode_password, encode_password


class PostgresBotUserRepository(BotUserRepository):
    """
    Postgres-backed implementation of `BotUserRepository`.

    Concurrent first contacts for the same handle are resolved by the
    primary key: the second insert is ignored and both callers read back
    the same row.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._ensure_table()

    def _get_connection(self):
        return psycopg2.connect(self._dsn)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
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
    def _to_domain(row: tuple) -> BotUser:
        return BotUser(
            handle=row[0],
            email=row[1],
            password=decode_password(row[2]),
            last_intent=Intent[row[3]],
        )

    def get_by_handle(self, handle: str) -> Optional[BotUser]:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT handle, email, encoded_password, last_intent
                    FROM bot_users
                    WHERE handle = %s
                    """,
                    (handle,),
                )
                row = cur.fetchone()
                if not row:
                    return None
                return self._to_domain(row)

    def add_user(self, user: BotUser) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO bot_users (handle, email, encoded_password, last_intent)
                    VALUES (%s, %s, %s, %s)
                    ON CONFLICT (handle) DO NOTHING
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
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE bot_users SET last_intent = %s WHERE handle = %s",
                    (intent.name, handle),
                )
                conn.commit()
