import json
from ipaddress import ip_address

import pytest
from fastapi.testclient import TestClient

from updown_webhook import main
from updown_webhook.config import get_settings
from updown_webhook.errors import ResolverError

from conftest import EVENTS, STRANGER_IP, UPDOWN_HEADERS


def sample(kind: str, counter: str = "updown_handler_total") -> float:
    value = main.metrics.registry.get_sample_value(
        counter,
        {"subsystem": "webhook", "handler": "process_events", "event": kind},
    )
    return value or 0.0


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_down_event_end_to_end(client):
    body = (
        '[{"event":"check.down","time":"2024-01-01T00:00:00Z",'
        '"downtime":{"id":"d1","error":"timeout","started_at":"2024-01-01T00:00:00Z"}}]'
    )

    r = client.post("/", content=body, headers=UPDOWN_HEADERS)

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "events": 1}
    assert sample("check.down") == 1
    assert sample("check.down", "updown_handler_failures_total") == 0


def test_ssl_invalid_without_cert(client):
    r = client.post("/", content='[{"event":"check.ssl_invalid","ssl":{}}]', headers=UPDOWN_HEADERS)

    assert r.status_code == 500
    assert r.json()["message"] == "1 event is invalid"
    assert sample("check.ssl_invalid") == 1
    assert sample("check.ssl_invalid", "updown_handler_failures_total") == 1


def test_mixed_batch(client):
    batch = list(EVENTS.values()) + [{"event": "check.nope"}, {"event": "check.up"}]

    r = client.post("/", content=json.dumps(batch), headers=UPDOWN_HEADERS)

    assert r.status_code == 500
    assert r.json() == {
        "status": "error",
        "message": "2 events are invalid",
        "events": len(EVENTS) + 2,
        "invalid": 2,
    }
    assert sample("check.up") == 2
    assert sample("check.up", "updown_handler_failures_total") == 1
    assert sample("check.nope", "updown_handler_failures_total") == 1


def test_malformed_body(client):
    r = client.post("/", content="{not json", headers=UPDOWN_HEADERS)

    assert r.status_code == 500
    assert "unable to parse request body" in r.json()["detail"]


def test_rejects_foreign_user_agent(client):
    headers = dict(UPDOWN_HEADERS, **{"User-Agent": "curl/8.0"})

    r = client.post("/", content=json.dumps([EVENTS["check.down"]]), headers=headers)

    assert r.status_code == 400
    assert sample("check.down") == 0


def test_rejects_first_forwarded_address(client):
    headers = dict(UPDOWN_HEADERS, **{"X-Forwarded-For": f"{STRANGER_IP}, {UPDOWN_HEADERS['X-Forwarded-For']}"})

    r = client.post("/", content=json.dumps([EVENTS["check.down"]]), headers=headers)

    assert r.status_code == 400


def test_get_is_not_allowed(client):
    r = client.get("/", headers=UPDOWN_HEADERS)

    assert r.status_code == 405


def test_metrics_exposition(client):
    client.post("/", content=json.dumps([EVENTS["check.up"]]), headers=UPDOWN_HEADERS)

    r = client.get("/metrics")

    assert r.status_code == 200
    assert "updown_handler_total" in r.text
    assert 'event="check.up"' in r.text
    assert "updown_build_info" in r.text


def test_startup_resolves_whitelist(monkeypatch):
    monkeypatch.delenv("ALLOWED_IPS", raising=False)
    monkeypatch.setenv("WHITELIST_HOST", "ips.example.test")
    get_settings.cache_clear()
    looked_up = []

    async def fake_resolve(hostname):
        looked_up.append(hostname)
        return frozenset({ip_address("192.0.2.1")})

    monkeypatch.setattr(main, "resolve_provider_ips", fake_resolve)

    with TestClient(main.app) as test_client:
        assert main.authenticator.provider_ips == frozenset({ip_address("192.0.2.1")})
        r = test_client.post(
            "/",
            content="[]",
            headers={"User-Agent": "updown.io", "X-Forwarded-For": "192.0.2.1"},
        )
        assert r.status_code == 200

    assert looked_up == ["ips.example.test"]
    get_settings.cache_clear()


def test_startup_fails_without_whitelist(monkeypatch):
    monkeypatch.delenv("ALLOWED_IPS", raising=False)
    get_settings.cache_clear()

    async def failing_resolve(hostname):
        raise ResolverError(f"Cannot resolve {hostname}")

    monkeypatch.setattr(main, "resolve_provider_ips", failing_resolve)

    with pytest.raises(ResolverError):
        with TestClient(main.app):
            pass

    get_settings.cache_clear()


def test_down_event_with_nulls(client):
    body = json.dumps(
        [
            {
                "event": "check.down",
                "time": "2024-01-01T00:00:00Z",
                "check": {"token": "abcd", "url": "https://example.com", "error": None},
                "downtime": {
                    "id": "d1",
                    "error": "timeout",
                    "started_at": "2024-01-01T00:00:00Z",
                    "ended_at": None,
                    "duration": None,
                },
            }
        ]
    )

    r = client.post("/", content=body, headers=UPDOWN_HEADERS)

    assert r.status_code == 200
    assert sample("check.down") == 1
    assert sample("check.down", "updown_handler_failures_total") == 0
