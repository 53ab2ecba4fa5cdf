# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- One-time password generation (secrets)
- Password hashing/verification (argon2)
- Signed, time-limited session tokens (itsdangerous)
"""
