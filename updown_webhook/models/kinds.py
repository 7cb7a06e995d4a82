"""Validated events, one model per event kind.

A webhook ``Event`` carries every payload block at once; once validated it is
narrowed to the variant for its kind, which only holds the fields that kind
uses.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from updown_webhook.models.event import Cert, Check, Downtime, Metric


class BaseKindEvent(BaseModel, ABC):
    """Fields common to every event kind."""

    time: datetime | None = None
    description: str = ""
    check: Check = Field(default_factory=Check)

    @abstractmethod
    def log_fields(self) -> dict[str, Any]:
        """Kind specific payload to attach to the "Received" log line."""
        ...


class DownEvent(BaseKindEvent):
    kind: Literal["check.down"] = "check.down"
    downtime: Downtime

    def log_fields(self) -> dict[str, Any]:
        return {"downtime": self.downtime.model_dump(mode="json", by_alias=True)}


class UpEvent(BaseKindEvent):
    kind: Literal["check.up"] = "check.up"
    downtime: Downtime

    def log_fields(self) -> dict[str, Any]:
        return {"downtime": self.downtime.model_dump(mode="json", by_alias=True)}


class SSLInvalidEvent(BaseKindEvent):
    kind: Literal["check.ssl_invalid"] = "check.ssl_invalid"
    cert: Cert
    error: str

    def log_fields(self) -> dict[str, Any]:
        return {"cert": self.cert.model_dump(mode="json", by_alias=True), "error": self.error}


class SSLValidEvent(BaseKindEvent):
    kind: Literal["check.ssl_valid"] = "check.ssl_valid"
    cert: Cert

    def log_fields(self) -> dict[str, Any]:
        return {"cert": self.cert.model_dump(mode="json", by_alias=True)}


class SSLExpirationEvent(BaseKindEvent):
    kind: Literal["check.ssl_expiration"] = "check.ssl_expiration"
    cert: Cert
    days_before_expiration: int = 0

    def log_fields(self) -> dict[str, Any]:
        return {
            "cert": self.cert.model_dump(mode="json", by_alias=True),
            "days_before_expiration": self.days_before_expiration,
        }


class SSLRenewedEvent(BaseKindEvent):
    kind: Literal["check.ssl_renewed"] = "check.ssl_renewed"
    new_cert: Cert
    old_cert: Cert

    def log_fields(self) -> dict[str, Any]:
        return {
            "new_cert": self.new_cert.model_dump(mode="json", by_alias=True),
            "old_cert": self.old_cert.model_dump(mode="json", by_alias=True),
        }


class PerformanceDropEvent(BaseKindEvent):
    kind: Literal["check.performance_drop"] = "check.performance_drop"
    apdex_dropped: str
    last_metrics: dict[datetime, Metric]

    def log_fields(self) -> dict[str, Any]:
        return {
            "apdex_dropped": self.apdex_dropped,
            "last_metrics": {
                ts.isoformat(): metric.apdex for ts, metric in self.last_metrics.items()
            },
        }


KindEvent = Annotated[
    DownEvent
    | UpEvent
    | SSLInvalidEvent
    | SSLValidEvent
    | SSLExpirationEvent
    | SSLRenewedEvent
    | PerformanceDropEvent,
    Field(discriminator="kind"),
]
