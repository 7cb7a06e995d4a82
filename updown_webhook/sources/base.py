"""Base class for webhook body decoders."""

from abc import ABC, abstractmethod

from updown_webhook.models.event import Event


class BaseSource(ABC):
    """Abstract base class for webhook payload decoders."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def parse(self, body: bytes) -> list[Event]:
        """Decode a raw request body into an ordered batch of events."""
        ...

    @abstractmethod
    def dump(self, events: list[Event]) -> bytes:
        """Encode a batch of events back to the wire format.

        Only fields that were set are written, so decoded bodies keep their shape.
        """
        ...
