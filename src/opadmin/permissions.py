# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from opadmin.auth.session import COOKIE_NAME
from opadmin.config import Settings
from opadmin.infra.models import Admin
from opadmin.services.account_service import AccountService


@dataclass(frozen=True)
class CurrentAdmin:
    admin: Admin
    token: str


def accounts(request: Request) -> AccountService:
    return request.app.state.accounts


async def require_admin(request: Request) -> CurrentAdmin:
    """Resolve the session cookie to an admin.

    Raises Unauthorized for any unusable token and AdminNotFound when the
    token outlived its record.
    """
    token = request.cookies.get(COOKIE_NAME, "")
    admin = await accounts(request).current_admin(token)
    return CurrentAdmin(admin=admin, token=token)


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": settings.cookie_samesite,
        "secure": settings.cookie_secure,
    }
