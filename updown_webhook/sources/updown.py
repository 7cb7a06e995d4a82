"""updown.io webhook body decoder."""

from pydantic import TypeAdapter, ValidationError

from updown_webhook.errors import DecodeError
from updown_webhook.models.event import Event
from updown_webhook.sources.base import BaseSource

_batch = TypeAdapter(list[Event])


class UpdownSource(BaseSource):
    """Decoder for updown.io Push API bodies (a JSON array of events)."""

    @property
    def name(self) -> str:
        return "updown"

    def parse(self, body: bytes) -> list[Event]:
        try:
            return _batch.validate_json(body)
        except ValidationError as e:
            raise DecodeError(
                f"unable to parse request body as events: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}"
            ) from e

    def dump(self, events: list[Event]) -> bytes:
        return _batch.dump_json(events, by_alias=True, exclude_unset=True)
