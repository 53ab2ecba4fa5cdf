# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account flows: register, send password, login, current admin.

Each flow opens its own session, awaits every store and mail call, and
reports failure by raising an OpAdminError subclass.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from opadmin.auth.passwords import PasswordHasher, generate_password
from opadmin.auth.session import SessionSigner
from opadmin.errors import AdminNotFound, InvalidCredentials, Unauthorized, UnknownEmail
from opadmin.infra.admin_repo import AdminRepository
from opadmin.infra.models import Admin


class PasswordMailer(Protocol):
    async def send_password(self, to: str, password: str) -> None: ...


class AccountService:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        *,
        hasher: PasswordHasher,
        signer: SessionSigner,
        mailer: PasswordMailer,
    ) -> None:
        self.session_maker = session_maker
        self.hasher = hasher
        self.signer = signer
        self.mailer = mailer

    async def register(self, name: str, email: str) -> Admin:
        async with self.session_maker() as session:
            admin = await AdminRepository(session).create(name=name, email=email)
        logger.info("Registered operational admin {} ({})", admin.email, admin.id)
        return admin

    async def send_password(self, email: str) -> None:
        """Issue a new password, store its hash, then mail it.

        The hash is committed before delivery is attempted, so a mail failure
        leaves the new (undelivered) password in place of the old one.
        """
        async with self.session_maker() as session:
            repo = AdminRepository(session)
            admin = await repo.find_by_email(email)
            if admin is None:
                raise UnknownEmail()
            password = generate_password()
            password_hash = await run_in_threadpool(self.hasher.hash, password)
            await repo.set_password_hash(admin, password_hash)
        logger.info("New password issued for {}", email)
        await self.mailer.send_password(email, password)

    async def login(self, email: str, password: str) -> Tuple[str, Admin]:
        async with self.session_maker() as session:
            admin = await AdminRepository(session).find_by_email(email)
        digest = admin.password_hash if admin is not None else None
        matched = await run_in_threadpool(self.hasher.verify, password, digest)
        if admin is None or not matched:
            logger.info("Failed login for {}", email)
            raise InvalidCredentials()
        token = self.signer.issue(admin.id, admin.email)
        logger.info("Login for {}", admin.email)
        return token, admin

    async def current_admin(self, token: Optional[str]) -> Admin:
        sess = self.signer.verify(token)
        if sess is None:
            raise Unauthorized()
        async with self.session_maker() as session:
            admin = await AdminRepository(session).get_by_id(sess.admin_id)
        if admin is None:
            logger.warning("Valid session for missing admin {}", sess.admin_id)
            raise AdminNotFound()
        return admin
