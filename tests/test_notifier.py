"""Tests for the console recovery notifier."""

import io

import pytest

from crusty_agent.core.errors import NotifierError
from crusty_agent.core.models import NotifierConfig, User
from crusty_agent.services.notifier import (
    ConsoleNotifier,
    RecoveryNotifier,
    build_recovery_message,
)


USER = User(
    username="alice",
    email="a@x.com",
    password_hash="$2b$04$abcdefghijklmnopqrstuuA1B2C3D4E5F6G7H8I9J0K1L2M3N4O5P",
    access_token="tok12345",
    created_at="2026-01-01T00:00:00+00:00",
)
SMTP = NotifierConfig(server="smtp.example.com", port=587, username="mailer", password="secret")


def test_message_has_username_and_token_only():
    message = build_recovery_message(USER)

    assert "To: a@x.com" in message
    assert "Subject: Crusty Server Credentials Recovery" in message
    assert "Username: alice" in message
    assert "Access Token: tok12345" in message
    assert USER.password_hash not in message


def test_console_notifier_writes_stream():
    stream = io.StringIO()
    ConsoleNotifier(stream=stream).send(USER, SMTP)

    out = stream.getvalue()
    assert out.startswith("=== RECOVERY EMAIL ===\n")
    assert out.endswith("=== END EMAIL ===\n")
    assert "Access Token: tok12345" in out


def test_closed_stream_raises_notifier_error():
    stream = io.StringIO()
    stream.close()
    with pytest.raises(NotifierError):
        ConsoleNotifier(stream=stream).send(USER, SMTP)


def test_notifier_without_send_cannot_be_created():
    class Incomplete(RecoveryNotifier):
        pass

    with pytest.raises(TypeError):
        Incomplete()
