# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer

COOKIE_NAME = "session-token"


@dataclass(frozen=True)
class SessionData:
    admin_id: str
    email: str


class SessionSigner:
    """Issues and checks signed session tokens.

    Tokens carry the admin id and email plus the signing timestamp. Nothing is
    stored server-side, so a token stays valid until it ages past ``max_age``
    even after the client logs out.
    """

    def __init__(self, secret_key: str, *, salt: str = "opadmin.session.v1", max_age: int = 15 * 3600) -> None:
        if not secret_key:
            raise ValueError("secret_key is required")
        self.max_age = max_age
        self._s = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def issue(self, admin_id: str, email: str) -> str:
        return self._s.dumps({"id": admin_id, "email": email})

    def verify(self, token: Optional[str]) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data = self._s.loads(token, max_age=self.max_age)
        except BadData:
            # expired, tampered and undecodable tokens alike
            return None
        if not isinstance(data, dict):
            return None
        admin_id = str(data.get("id") or "").strip()
        email = data.get("email")
        if not admin_id or not isinstance(email, str) or not email:
            return None
        return SessionData(admin_id=admin_id, email=email)
