from types import SimpleNamespace

import pytest

from app.services import email_services
from app.services.email_services import SmtpNotifier


def _config(**overrides):
    values = {
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": 587,
        "SMTP_USER": None,
        "SMTP_PASS": None,
        "FROM_EMAIL": None,
        "MAIL_FROM_NAME": "Test Store",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.messages.append(msg)


@pytest.fixture()
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email_services.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def test_missing_sender_never_contacts_relay(fake_smtp, caplog):
    notifier = SmtpNotifier(_config())

    assert "outgoing mail is disabled" in caplog.text
    assert notifier.send("budi@example.com", "Subject", "Body") is False
    assert fake_smtp.instances == []


def test_smtp_user_is_used_as_sender_fallback(fake_smtp):
    notifier = SmtpNotifier(_config(SMTP_USER="mailer@example.com", SMTP_PASS="app-pass"))

    assert notifier.send("budi@example.com", "Subject", "Body") is True

    server = fake_smtp.instances[0]
    assert server.logged_in == ("mailer@example.com", "app-pass")
    message = server.messages[0]
    assert message["From"] == "Test Store <mailer@example.com>"
    assert message["To"] == "budi@example.com"
    assert message["Subject"] == "Subject"


def test_relay_failure_returns_false(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("relay down")

    monkeypatch.setattr(email_services.smtplib, "SMTP", refuse)
    notifier = SmtpNotifier(_config(FROM_EMAIL="store@example.com"))

    assert notifier.send("budi@example.com", "Subject", "Body") is False
