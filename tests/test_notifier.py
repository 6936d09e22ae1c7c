from __future__ import annotations

import logging

import requests

from pagewatch.notifiers.telegram import NotifyResult, TelegramNotifier
from pagewatch.notifiers.templates import render_digest

ENDPOINT = "https://api.telegram.org/bot123:abc/sendMessage"


def test_digest_lists_every_source_with_none_marker() -> None:
    text = render_digest({"A": ["x"], "B": []})
    assert text == "*A Items:*\n- x\n\n*B Items:*\nNone"


def test_digest_uses_labels_and_keeps_order() -> None:
    text = render_digest(
        {"unionly": ["[Hat](https://u.io/p/1)", "Scarf"], "theatrical": []},
        {"unionly": "Unionly", "theatrical": "TheatricalTraining.org"},
    )
    lines = text.splitlines()
    assert lines[0] == "*Unionly Items:*"
    assert lines[1:3] == ["- [Hat](https://u.io/p/1)", "- Scarf"]
    assert lines[-2:] == ["*TheatricalTraining.org Items:*", "None"]


def test_send_posts_single_message(fake_session, make_response) -> None:
    fake_session.routes[("POST", ENDPOINT)] = make_response(payload={"ok": True})
    notifier = TelegramNotifier("123:abc", "42", labels={"A": "Alpha"}, session=fake_session)

    assert notifier.send({"A": ["x"]}) is NotifyResult.SENT

    posts = fake_session.calls_for("POST")
    assert len(posts) == 1
    body = posts[0][2]["json"]
    assert body["chat_id"] == "42"
    assert body["text"] == "*Alpha Items:*\n- x"
    assert body["parse_mode"] == "Markdown"
    assert body["disable_web_page_preview"] is False


def test_missing_credentials_skip_without_network(fake_session, caplog) -> None:
    with caplog.at_level(logging.ERROR):
        assert TelegramNotifier(None, "42", session=fake_session).send({"A": ["x"]}) is NotifyResult.SKIPPED
        assert TelegramNotifier("123:abc", None, session=fake_session).send({"A": ["x"]}) is NotifyResult.SKIPPED
    assert fake_session.calls == []
    assert "Skipping Telegram message" in caplog.text


def test_delivery_failure_logs_body_and_message(fake_session, make_response, caplog) -> None:
    fake_session.routes[("POST", ENDPOINT)] = make_response(
        status_code=400, text='{"ok":false,"description":"can\'t parse entities"}'
    )
    notifier = TelegramNotifier("123:abc", "42", session=fake_session)

    with caplog.at_level(logging.ERROR):
        assert notifier.send({"A": ["x"]}) is NotifyResult.FAILED

    assert "can't parse entities" in caplog.text
    assert "*A Items:*" in caplog.text


def test_network_error_is_not_raised(fake_session) -> None:
    fake_session.routes[("POST", ENDPOINT)] = requests.ConnectionError("offline")
    notifier = TelegramNotifier("123:abc", "42", session=fake_session)
    assert notifier.send({"A": ["x"]}) is NotifyResult.FAILED
