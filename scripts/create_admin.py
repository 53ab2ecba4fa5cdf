#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from opadmin.auth.passwords import PasswordHasher
from opadmin.auth.session import SessionSigner
from opadmin.config import Settings
from opadmin.errors import OpAdminError
from opadmin.infra.db import create_engine, create_session_maker, init_models
from opadmin.infra.admin_repo import AdminRepository
from opadmin.logs import setup_logging
from opadmin.services.account_service import AccountService
from opadmin.services.mail_service import Mailer


async def _run(name: str, email: str, send: bool) -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    engine = create_engine(settings.database_url)
    try:
        await init_models(engine)
        async with create_session_maker(engine)() as session:
            repo = AdminRepository(session)
            admin = await repo.create(name=name, email=email)
            total = await repo.count()
        print(f"OK -> {admin.email} ({admin.id}), {total} admin(s) registered")
        if send:
            service = AccountService(
                create_session_maker(engine),
                hasher=PasswordHasher(time_cost=settings.hash_time_cost),
                signer=SessionSigner(settings.secret_key, salt=settings.session_salt, max_age=settings.session_max_age),
                mailer=Mailer(settings.smtp),
            )
            await service.send_password(admin.email)
            print(f"Password sent to {admin.email}")
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Register an operational admin")
    parser.add_argument("name")
    parser.add_argument("email")
    parser.add_argument("--send-password", action="store_true", help="mail a first password right away")
    args = parser.parse_args()
    try:
        asyncio.run(_run(args.name.strip(), args.email, args.send_password))
    except OpAdminError as e:
        raise SystemExit(e.message)


if __name__ == "__main__":
    main()
