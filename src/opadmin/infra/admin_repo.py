# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store for operational admins.

All methods run on the caller's AsyncSession and commit their own writes.
SQLAlchemy errors other than the unique-email violation surface as
PersistenceFailure; the original exception is chained.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from opadmin.errors import DuplicateEmail, PersistenceFailure
from opadmin.infra.models import Admin


class AdminRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_email(self, email: str) -> Optional[Admin]:
        if not email:
            return None
        try:
            result = await self.session.execute(select(Admin).where(Admin.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceFailure() from e

    async def get_by_id(self, admin_id: str) -> Optional[Admin]:
        if not admin_id:
            return None
        try:
            return await self.session.get(Admin, admin_id)
        except SQLAlchemyError as e:
            raise PersistenceFailure() from e

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count()).select_from(Admin))
            return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise PersistenceFailure() from e

    async def create(self, name: str, email: str) -> Admin:
        if await self.find_by_email(email) is not None:
            raise DuplicateEmail()
        admin = Admin(name=name, email=email)
        self.session.add(admin)
        try:
            await self.session.commit()
            await self.session.refresh(admin)
        except IntegrityError as e:
            # lost a race against a concurrent registration of the same email
            await self.session.rollback()
            logger.info("Duplicate email rejected by unique constraint: {}", email)
            raise DuplicateEmail() from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceFailure() from e
        return admin

    async def set_password_hash(self, admin: Admin, password_hash: str) -> None:
        admin.password_hash = password_hash
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceFailure() from e
