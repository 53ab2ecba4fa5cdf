# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
import string
from typing import Optional

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
PASSWORD_LENGTH = 16


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Random secret, each character drawn independently from ALPHABET."""
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


class PasswordHasher:
    """argon2id hashing with a fixed, configurable cost factor."""

    def __init__(self, time_cost: int = 3) -> None:
        self.time_cost = time_cost
        self._ph = _Argon2Hasher(time_cost=time_cost)
        # stand-in digest so a missing account costs as much as a wrong password
        self._dummy_hash = self._ph.hash(generate_password())

    def hash(self, plain: str) -> str:
        if not plain:
            raise ValueError("Empty password")
        return self._ph.hash(plain)

    def verify(self, plain: str, hash_value: Optional[str]) -> bool:
        usable = bool(hash_value and plain)
        if not usable:
            hash_value, plain = self._dummy_hash, plain or "-"
        try:
            matched = self._ph.verify(hash_value, plain)
        except (VerificationError, InvalidHashError):
            return False
        return matched and usable
