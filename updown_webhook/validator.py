"""Per-kind structural validation of webhook events."""

from collections.abc import Callable

from updown_webhook.errors import EventValidationError
from updown_webhook.models.event import Event
from updown_webhook.models.kinds import (
    DownEvent,
    KindEvent,
    PerformanceDropEvent,
    SSLExpirationEvent,
    SSLInvalidEvent,
    SSLRenewedEvent,
    SSLValidEvent,
    UpEvent,
)


def _expected(event: Event, *fields: str) -> EventValidationError:
    names = "' and '".join(fields)
    return EventValidationError(
        event.kind, f"expected '{event.kind}' event to contain '{names}'"
    )


def _require_downtime(event: Event) -> None:
    if event.downtime.is_empty():
        raise _expected(event, "downtime")


def _require_cert(event: Event) -> None:
    if event.ssl.is_empty():
        raise _expected(event, "ssl")
    if event.ssl.cert.is_empty():
        raise _expected(event, "ssl.cert")


def _common(event: Event) -> dict:
    return {"time": event.time, "description": event.description, "check": event.check}


def _down(event: Event) -> KindEvent:
    _require_downtime(event)
    return DownEvent(downtime=event.downtime, **_common(event))


def _up(event: Event) -> KindEvent:
    _require_downtime(event)
    return UpEvent(downtime=event.downtime, **_common(event))


def _ssl_invalid(event: Event) -> KindEvent:
    _require_cert(event)
    if not event.ssl.error:
        raise _expected(event, "ssl.error")
    return SSLInvalidEvent(cert=event.ssl.cert, error=event.ssl.error, **_common(event))


def _ssl_valid(event: Event) -> KindEvent:
    _require_cert(event)
    return SSLValidEvent(cert=event.ssl.cert, **_common(event))


def _ssl_expiration(event: Event) -> KindEvent:
    _require_cert(event)
    # Zero days before expiration is a real value, not a missing one
    return SSLExpirationEvent(
        cert=event.ssl.cert,
        days_before_expiration=event.ssl.days_before_expiration,
        **_common(event),
    )


def _ssl_renewed(event: Event) -> KindEvent:
    if event.ssl.is_empty():
        raise _expected(event, "ssl")
    if event.ssl.new_cert.is_empty() and event.ssl.old_cert.is_empty():
        raise _expected(event, "ssl.new_cert", "ssl.old_cert")
    return SSLRenewedEvent(
        new_cert=event.ssl.new_cert, old_cert=event.ssl.old_cert, **_common(event)
    )


def _performance_drop(event: Event) -> KindEvent:
    if not event.apdex_dropped:
        raise _expected(event, "apdex_dropped")
    if not event.last_metrics:
        raise _expected(event, "last_metrics")
    return PerformanceDropEvent(
        apdex_dropped=event.apdex_dropped,
        last_metrics=event.last_metrics,
        **_common(event),
    )


_VALIDATORS: dict[str, Callable[[Event], KindEvent]] = {
    "check.down": _down,
    "check.up": _up,
    "check.ssl_invalid": _ssl_invalid,
    "check.ssl_valid": _ssl_valid,
    "check.ssl_expiration": _ssl_expiration,
    "check.ssl_renewed": _ssl_renewed,
    "check.performance_drop": _performance_drop,
}

EVENT_KINDS = frozenset(_VALIDATORS)


def validate(event: Event) -> KindEvent:
    """Check the payload required by the event's kind.

    Returns the event narrowed to its kind's model. Payload blocks belonging
    to other kinds are ignored.

    Raises:
        EventValidationError: If the kind is unknown or its payload is missing.
    """
    validator = _VALIDATORS.get(event.kind)
    if validator is None:
        raise EventValidationError(
            event.kind, f"unrecognized event kind: '{event.kind}'"
        )
    return validator(event)
