import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from opadmin.app import create_app
from opadmin.auth.passwords import PasswordHasher
from opadmin.auth.session import SessionSigner
from opadmin.config import Settings, SmtpSettings
from opadmin.errors import MailDeliveryFailure
from opadmin.infra.db import create_engine, create_session_maker, init_models
from opadmin.services.account_service import AccountService

SECRET = "test-secret-key"


class RecordingMailer:
    """Stands in for SMTP delivery; keeps every (to, password) pair."""

    def __init__(self) -> None:
        self.sent: List[Tuple[str, str]] = []
        self.fail = False

    async def send_password(self, to: str, password: str) -> None:
        if self.fail:
            raise MailDeliveryFailure()
        self.sent.append((to, password))

    def last_password(self, to: str) -> str:
        return [p for t, p in self.sent if t == to][-1]


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'opadmin.db'}",
        secret_key=SECRET,
        smtp=SmtpSettings(host="localhost", port=2525, user="mailer@example.com", password="pw", sender="mailer@example.com"),
        hash_time_cost=1,
    )


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def client(settings, mailer):
    app = create_app(settings, mailer=mailer)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
async def session_maker(settings):
    engine = create_engine(settings.database_url)
    await init_models(engine)
    yield create_session_maker(engine)
    await engine.dispose()


@pytest.fixture()
def service(session_maker, settings, mailer) -> AccountService:
    return AccountService(
        session_maker,
        hasher=PasswordHasher(time_cost=settings.hash_time_cost),
        signer=SessionSigner(SECRET, max_age=settings.session_max_age),
        mailer=mailer,
    )
