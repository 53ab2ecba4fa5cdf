# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from opadmin.errors import ConfigError

REQUIRED_VARS = (
    "OPADMIN_DATABASE_URL",
    "OPADMIN_SECRET_KEY",
    "OPADMIN_SMTP_HOST",
    "OPADMIN_SMTP_PORT",
    "OPADMIN_SMTP_USER",
    "OPADMIN_SMTP_PASSWORD",
)

_TRUE = {"1", "true", "yes", "y"}
_SAMESITE = {"lax", "strict", "none"}


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    user: str
    password: str
    sender: str
    timeout: float = 30.0

    @property
    def implicit_tls(self) -> bool:
        return self.port == 465


@dataclass(frozen=True)
class Settings:
    database_url: str
    secret_key: str
    smtp: SmtpSettings
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False
    session_salt: str = "opadmin.session.v1"
    session_ttl_hours: float = 15.0
    hash_time_cost: int = 3
    cookie_secure: bool = False
    cookie_samesite: str = "lax"
    cors_origins: Tuple[str, ...] = field(default=("http://localhost:3000",))
    log_level: str = "INFO"

    @property
    def session_max_age(self) -> int:
        return int(self.session_ttl_hours * 3600)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Secrets and connection details have no defaults: a missing one raises
        ConfigError listing every absent variable.
        """
        env = os.environ if environ is None else environ

        missing = [k for k in REQUIRED_VARS if not (env.get(k) or "").strip()]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        smtp_user = env["OPADMIN_SMTP_USER"].strip()
        smtp = SmtpSettings(
            host=env["OPADMIN_SMTP_HOST"].strip(),
            port=_int(env, "OPADMIN_SMTP_PORT", "0", minimum=1),
            user=smtp_user,
            password=env["OPADMIN_SMTP_PASSWORD"],
            sender=(env.get("OPADMIN_MAIL_FROM") or smtp_user).strip(),
        )

        samesite = (env.get("OPADMIN_COOKIE_SAMESITE") or "lax").strip().lower()
        if samesite not in _SAMESITE:
            raise ConfigError(f"OPADMIN_COOKIE_SAMESITE must be one of {sorted(_SAMESITE)}, got {samesite!r}")
        secure = (env.get("OPADMIN_COOKIE_SECURE") or "false").strip().lower() in _TRUE
        if samesite == "none" and not secure:
            # Browsers drop SameSite=None cookies that are not Secure.
            raise ConfigError("OPADMIN_COOKIE_SAMESITE=none requires OPADMIN_COOKIE_SECURE=true")

        origins = tuple(
            o.strip() for o in (env.get("OPADMIN_CORS_ORIGINS") or "http://localhost:3000").split(",") if o.strip()
        )

        return cls(
            database_url=env["OPADMIN_DATABASE_URL"].strip(),
            secret_key=env["OPADMIN_SECRET_KEY"],
            smtp=smtp,
            host=(env.get("OPADMIN_HOST") or "0.0.0.0").strip(),
            port=_int(env, "OPADMIN_PORT", "5000", minimum=1),
            reload=(env.get("OPADMIN_RELOAD") or "false").strip().lower() in _TRUE,
            session_salt=(env.get("OPADMIN_SESSION_SALT") or "opadmin.session.v1").strip(),
            session_ttl_hours=_float(env, "OPADMIN_SESSION_TTL_HOURS", "15"),
            hash_time_cost=_int(env, "OPADMIN_HASH_TIME_COST", "3", minimum=1),
            cookie_secure=secure,
            cookie_samesite=samesite,
            cors_origins=origins,
            log_level=(env.get("OPADMIN_LOG_LEVEL") or "INFO").strip().upper(),
        )


def _int(env: Mapping[str, str], key: str, default: str, *, minimum: Optional[int] = None) -> int:
    raw = (env.get(key) or default).strip()
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ConfigError(f"{key} must be at least {minimum}, got {value}")
    return value


def _float(env: Mapping[str, str], key: str, default: str) -> float:
    raw = (env.get(key) or default).strip()
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{key} must be a positive finite number, got {raw!r}")
    return value
