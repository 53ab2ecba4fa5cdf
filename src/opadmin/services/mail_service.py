# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage

from loguru import logger
from starlette.concurrency import run_in_threadpool

from opadmin.config import SmtpSettings
from opadmin.errors import MailDeliveryFailure

PASSWORD_SUBJECT = "Your Login Password"


def build_password_message(*, sender: str, to: str, password: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = PASSWORD_SUBJECT
    msg.set_content(f"Your login password is: {password}")
    return msg


class Mailer:
    """SMTP delivery. Sending is blocking, so it runs in the threadpool."""

    def __init__(self, settings: SmtpSettings) -> None:
        self.settings = settings

    async def send_password(self, to: str, password: str) -> None:
        msg = build_password_message(sender=self.settings.sender, to=to, password=password)
        try:
            await run_in_threadpool(self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Mail delivery to {} failed: {!r}", to, e)
            raise MailDeliveryFailure() from e
        logger.info("Password mail delivered to {}", to)

    def _send(self, msg: EmailMessage) -> None:
        s = self.settings
        if s.implicit_tls:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                s.host, s.port, timeout=s.timeout, context=ssl.create_default_context()
            )
        else:
            smtp = smtplib.SMTP(s.host, s.port, timeout=s.timeout)
        with smtp:
            if not s.implicit_tls:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()
            smtp.login(s.user, s.password)
            smtp.send_message(msg)
