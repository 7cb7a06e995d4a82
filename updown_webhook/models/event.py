"""updown.io webhook payload models.

See https://updown.io/api (Push API / webhooks). A single POST carries a
list of events; which of ``downtime``, ``ssl`` or the performance fields is
populated depends on the event kind. Nothing marks a block as present on
the wire, so a block equal to its default instance counts as absent.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def null_is_zero(cls, data: Any) -> Any:
        # updown.io sends null for unset fields; treat it as the zero value
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def is_empty(self) -> bool:
        """True when every field still holds its default value."""
        return self.model_dump() == type(self)().model_dump()


class Check(_Payload):
    """Snapshot of the monitored check, passed through untouched."""

    token: str = ""
    url: str = ""
    alias: str = ""
    last_status: int = 0
    uptime: float = 0.0
    down: bool = False
    down_since: datetime | None = None
    error: str = ""
    period: int = 0
    apdex_t: float = 0.0
    string_match: str = ""
    enabled: bool = False
    published: bool = False
    disabled_locations: list[str] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    last_check_at: datetime | None = None
    next_check_at: datetime | None = None
    mute_until: datetime | None = None
    favicon_url: str = ""
    custom_headers: dict[str, list[str]] = Field(default_factory=dict)
    http_verb: str = ""
    http_body: str = ""


class Downtime(_Payload):
    id: str = ""
    error: str = ""
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration: int = 0
    # Undocumented upstream; kept as whatever JSON value arrives
    partial: Any = None


class Cert(_Payload):
    subject: str = ""
    issuer: str = ""
    from_: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("from", "From"),
        serialization_alias="from",
    )
    to: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("to", "To"),
        serialization_alias="to",
    )
    algorithm: str = ""


class SSL(_Payload):
    """Certificate details.

    ``cert`` is set for ssl_invalid, ssl_valid and ssl_expiration events,
    ``new_cert``/``old_cert`` for ssl_renewed.
    """

    days_before_expiration: int = Field(default=0, ge=0)
    error: str = ""
    cert: Cert = Field(default_factory=Cert)
    new_cert: Cert = Field(default_factory=Cert)
    old_cert: Cert = Field(default_factory=Cert)


class Metric(_Payload):
    apdex: float = 0.0


class Event(_Payload):
    """A single webhook event as sent on the wire."""

    kind: str = Field(
        default="",
        validation_alias="event",
        serialization_alias="event",
        description="Event kind, e.g. check.down",
    )
    time: datetime | None = None
    description: str = ""
    check: Check = Field(default_factory=Check)

    # Only present with check.performance_drop
    apdex_dropped: str = ""
    last_metrics: dict[datetime, Metric] = Field(default_factory=dict)

    downtime: Downtime = Field(default_factory=Downtime)
    ssl: SSL = Field(default_factory=SSL)
