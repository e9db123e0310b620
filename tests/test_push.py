"""
Tests for the push gateway client.
"""

import logging

import requests

from episupport.models.models import User
from episupport.schemas.enums import DeliveryStatus
from episupport.utils import push
from episupport.utils.push import Delivered, Failed, PushNotifier


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakePoster:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(body={"data": {"status": "ok", "id": "ticket-1"}})
        self.error = error
        self.calls = []

    def __call__(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def test_send_posts_expected_payload(monkeypatch):
    poster = FakePoster()
    monkeypatch.setattr(push.requests, "post", poster)
    notifier = PushNotifier(url="https://push.test/send", timeout=3)

    result = notifier.send("TOK1", "Seizure Alert!", "Alice might need help!", {"navigateTo": "gps"})

    assert result == Delivered(token="TOK1")
    assert result.status == DeliveryStatus.DELIVERED
    assert poster.calls == [{
        "url": "https://push.test/send",
        "json": {
            "to": "TOK1",
            "title": "Seizure Alert!",
            "body": "Alice might need help!",
            "data": {"navigateTo": "gps"},
        },
        "timeout": 3,
    }]


def test_non_2xx_is_failed(monkeypatch):
    monkeypatch.setattr(push.requests, "post", FakePoster(FakeResponse(status_code=503, text="down")))

    result = PushNotifier().send("TOK1", "t", "b")

    assert isinstance(result, Failed)
    assert result.status == DeliveryStatus.FAILED
    assert "503" in result.reason


def test_transport_error_is_swallowed(monkeypatch):
    monkeypatch.setattr(push.requests, "post", FakePoster(error=requests.ConnectionError("refused")))

    result = PushNotifier().send("TOK1", "t", "b")

    assert isinstance(result, Failed)
    assert "refused" in result.reason


def test_error_ticket_is_failed(monkeypatch):
    body = {"data": {"status": "error", "message": "DeviceNotRegistered"}}
    monkeypatch.setattr(push.requests, "post", FakePoster(FakeResponse(body=body)))

    result = PushNotifier().send("TOK1", "t", "b")

    assert result == Failed(token="TOK1", reason="DeviceNotRegistered")


def test_non_json_success_counts_as_delivered(monkeypatch):
    monkeypatch.setattr(push.requests, "post", FakePoster(FakeResponse(text="ok")))
    assert isinstance(PushNotifier().send("TOK1", "t", "b"), Delivered)


def test_session_is_used_when_given():
    class Session:
        post = FakePoster()

    notifier = PushNotifier(session=Session())
    notifier.send("TOK9", "t", "b")
    assert Session.post.calls[0]["json"]["to"] == "TOK9"


def test_send_to_user_without_token_skips_gateway(monkeypatch):
    poster = FakePoster()
    monkeypatch.setattr(push.requests, "post", poster)

    result = PushNotifier().send_to_user(User(email="x@x.com", push_token=None), "t", "b")

    assert isinstance(result, Failed)
    assert result.reason == "no push token"
    assert poster.calls == []


def test_logs_never_carry_the_full_token(monkeypatch, caplog):
    token = "ExponentPushToken[abcdef0123456789]"
    caplog.set_level(logging.INFO, logger="episupport.utils.push")

    monkeypatch.setattr(push.requests, "post", FakePoster())
    PushNotifier().send(token, "t", "b")
    monkeypatch.setattr(push.requests, "post", FakePoster(FakeResponse(status_code=500, text="boom")))
    PushNotifier().send(token, "t", "b")
    monkeypatch.setattr(push.requests, "post", FakePoster(error=requests.Timeout("slow")))
    PushNotifier().send(token, "t", "b")

    assert "ExponentPu..." in caplog.text
    assert token not in caplog.text
