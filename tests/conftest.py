"""Shared fixtures: a fake metrics sink, event factories and an app client."""

from collections import Counter
from typing import Any

import pytest
from fastapi.testclient import TestClient

from updown_webhook.config import get_settings
from updown_webhook.metrics import BaseMetrics
from updown_webhook.models.event import Event

UPDOWN_IP = "198.51.100.7"
OTHER_UPDOWN_IP = "2001:db8::7"
STRANGER_IP = "203.0.113.9"

UPDOWN_HEADERS = {
    "User-Agent": "updown.io webhooks (https://updown.io)",
    "X-Forwarded-For": UPDOWN_IP,
}

CERT = {
    "subject": "CN=example.com",
    "issuer": "CN=R3, O=Let's Encrypt",
    "from": "2024-01-01T00:00:00Z",
    "to": "2024-04-01T00:00:00Z",
    "algorithm": "SHA256withRSA",
}

EVENTS: dict[str, dict[str, Any]] = {
    "check.down": {
        "event": "check.down",
        "time": "2024-01-01T00:00:00Z",
        "description": "DOWN: https://example.com is not responding",
        "check": {"token": "abcd", "url": "https://example.com", "last_status": 500},
        "downtime": {
            "id": "d1",
            "error": "timeout",
            "started_at": "2024-01-01T00:00:00Z",
        },
    },
    "check.up": {
        "event": "check.up",
        "time": "2024-01-01T00:10:00Z",
        "description": "UP: https://example.com is back",
        "downtime": {
            "id": "d1",
            "error": "timeout",
            "started_at": "2024-01-01T00:00:00Z",
            "ended_at": "2024-01-01T00:10:00Z",
            "duration": 600,
            "partial": None,
        },
    },
    "check.ssl_invalid": {
        "event": "check.ssl_invalid",
        "ssl": {"cert": CERT, "error": "certificate has expired"},
    },
    "check.ssl_valid": {
        "event": "check.ssl_valid",
        "ssl": {"cert": CERT},
    },
    "check.ssl_expiration": {
        "event": "check.ssl_expiration",
        "ssl": {"cert": CERT, "days_before_expiration": 7},
    },
    "check.ssl_renewed": {
        "event": "check.ssl_renewed",
        "ssl": {"new_cert": CERT, "old_cert": dict(CERT, to="2024-01-02T00:00:00Z")},
    },
    "check.performance_drop": {
        "event": "check.performance_drop",
        "apdex_dropped": "0.9 to 0.6",
        "last_metrics": {
            "2024-01-01T00:00:00Z": {"apdex": 0.9},
            "2024-01-01T01:00:00Z": {"apdex": 0.6},
        },
    },
}


class FakeMetrics(BaseMetrics):
    """Records increments keyed by (counter, event kind)."""

    def __init__(self):
        self.counts: Counter[tuple[str, str]] = Counter()
        self.calls: list[tuple[str, dict[str, str]]] = []

    def increment(self, name: str, labels: dict[str, str]) -> None:
        self.calls.append((name, labels))
        self.counts[(name, labels["event"])] += 1

    def total(self, name: str) -> int:
        return sum(n for (counter, _), n in self.counts.items() if counter == name)


def make_event(kind: str, **overrides: Any) -> Event:
    data = dict(EVENTS[kind], **overrides)
    return Event.model_validate(data)


@pytest.fixture()
def fake_metrics() -> FakeMetrics:
    return FakeMetrics()


@pytest.fixture()
def client(monkeypatch) -> TestClient:
    """App client with a static updown.io IP set instead of a DNS lookup."""
    monkeypatch.setenv("ALLOWED_IPS", f'["{UPDOWN_IP}", "{OTHER_UPDOWN_IP}"]')
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("SUBSYSTEM", "webhook")
    get_settings.cache_clear()

    from updown_webhook.main import app

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()
