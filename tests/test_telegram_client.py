"""
Tests for the Telegram Bot API client. HTTP is mocked at the session.
"""

from unittest.mock import MagicMock, Mock

import pytest
import requests

from template_watcher.errors import ConfigError, TelegramError
from template_watcher.telegram_client import TelegramClient


def _response(status=200, body=None):
    resp = Mock(spec=requests.Response)
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = body if body is not None else {"ok": status < 400}
    resp.text = str(body)
    return resp


@pytest.fixture
def session():
    s = MagicMock(spec=requests.Session)
    s.__enter__.return_value = s
    s.__exit__.return_value = False
    s.post.return_value = _response()
    return s


def test_send_message_payload(session):
    client = TelegramClient("123:abc", "-100", timeout=7, session_factory=lambda: session)

    client.send_message("<b>hi</b>")

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.telegram.org/bot123:abc/sendMessage"
    assert kwargs["json"] == {
        "chat_id": "-100",
        "text": "<b>hi</b>",
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }
    assert kwargs["timeout"] == 7


def test_send_document_is_multipart(session):
    client = TelegramClient("123:abc", "-100", session_factory=lambda: session)

    client.send_document("new.txt", b"a.yaml\n", caption="header")

    args, kwargs = session.post.call_args
    assert args[0].endswith("/sendDocument")
    assert kwargs["data"]["chat_id"] == "-100"
    assert kwargs["data"]["caption"] == "header"
    assert kwargs["files"] == {"document": ("new.txt", b"a.yaml\n", "text/plain")}


def test_error_response_raises(session):
    session.post.return_value = _response(400, {"ok": False, "description": "Bad Request: message is too long"})
    client = TelegramClient("123:abc", "-100", session_factory=lambda: session)

    with pytest.raises(TelegramError) as exc:
        client.send_message("x")

    assert exc.value.status_code == 400
    assert "too long" in exc.value.description


def test_dry_run_sends_nothing(session, caplog):
    client = TelegramClient(None, None, dry_run=True, session_factory=lambda: session)

    with caplog.at_level("INFO"):
        client.send_message("hello")
        client.send_document("f.txt", b"x")

    session.post.assert_not_called()
    assert "[DRY_RUN]" in caplog.text


def test_missing_credentials_raise():
    with pytest.raises(ConfigError):
        TelegramClient("123:abc", None)
    with pytest.raises(ConfigError):
        TelegramClient(None, "-100")


def test_each_send_uses_its_own_session():
    created = []

    def factory():
        s = MagicMock(spec=requests.Session)
        s.__enter__.return_value = s
        s.__exit__.return_value = False
        s.post.return_value = _response()
        created.append(s)
        return s

    client = TelegramClient("123:abc", "-100", session_factory=factory)

    client.send_message("one")
    client.send_document("f.txt", b"x")

    assert len(created) == 2
    for s in created:
        s.post.assert_called_once()
        s.__exit__.assert_called_once()
