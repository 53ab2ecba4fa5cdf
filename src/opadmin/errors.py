# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy.

Every OpAdminError carries the message shown to the client and the HTTP status
it maps to. Internal failures (mail, persistence) keep a generic message; the
underlying exception is chained and logged server-side only.
"""

from __future__ import annotations

from typing import Optional


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class OpAdminError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateEmail(OpAdminError):
    status_code = 400
    message = "Email is already registered"


class UnknownEmail(OpAdminError):
    status_code = 400
    message = "Email is not registered"


class InvalidCredentials(OpAdminError):
    status_code = 400
    message = "Invalid email or password"


class Unauthorized(OpAdminError):
    status_code = 401
    message = "Unauthorized access"


class AdminNotFound(OpAdminError):
    status_code = 404
    message = "Admin not found"


class MailDeliveryFailure(OpAdminError):
    status_code = 500
    message = "Error sending email"


class PersistenceFailure(OpAdminError):
    status_code = 500
    message = "Internal server error"
