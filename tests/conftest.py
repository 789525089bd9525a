import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]
TEST_DB_PATH = BASE_DIR / "test.db"

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PROJECT_NAME", "Test Store")

import app.main as main  # noqa: E402  (import after env vars are set)
from app.config import settings  # noqa: E402
from app.database import Base, engine  # noqa: E402
from app.services.account_service import AccountService  # noqa: E402
from app.services.auth_service import JwtTokenSigner  # noqa: E402
from app.services.email_services import get_notifier  # noqa: E402
from app.services.password_hasher import BcryptHasher  # noqa: E402


class RecordingNotifier:
    """Keeps sent mail in memory instead of talking to SMTP."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: list[dict] = []

    def send(self, to: str, subject: str, body: str) -> bool:
        self.sent.append({"to": to, "subject": subject, "body": body})
        return self.succeed


class InMemoryCredentialStore:
    def __init__(self):
        self.users = {}
        self.lookups: list[str] = []
        self.saves = 0
        self._next_id = 1

    def find_by_email(self, email):
        self.lookups.append(email)
        return next((user for user in self.users.values() if user.email == email), None)

    def find_by_id(self, user_id):
        return self.users.get(user_id)

    def create(self, user):
        user.id = self._next_id
        self._next_id += 1
        self.users[user.id] = user
        return user

    def save(self, user):
        self.saves += 1
        self.users[user.id] = user
        return user


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def client(notifier):
    """Provide a TestClient on a fresh schema with mail delivery captured."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    main.app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture()
def store():
    return InMemoryCredentialStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def account_service(store, notifier, clock):
    return AccountService(
        store=store,
        hasher=BcryptHasher(rounds=4),
        notifier=notifier,
        signer=JwtTokenSigner(settings),
        config=settings,
        clock=clock,
    )
