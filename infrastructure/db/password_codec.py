"""
Reversible obfuscation of stored backend passwords.

This is Base64, not encryption: it only keeps passwords from being
readable at a glance in the database.
"""

from __future__ import annotations

import base64


def encode_password(password: str) -> str:
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def decode_password(encoded: str) -> str:
    return base64.b64decode(encoded.encode("ascii")).decode("utf-8")
