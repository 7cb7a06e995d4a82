"""Validate, log and count each event of a webhook batch."""

import logging

from updown_webhook.errors import BatchError, EventValidationError
from updown_webhook.metrics import HANDLER_FAILURES, HANDLER_TOTAL, BaseMetrics
from updown_webhook.models.event import Event
from updown_webhook.models.kinds import KindEvent
from updown_webhook.validator import validate

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Runs every event of a batch through validation, logging and metrics.

    Events are independent: an invalid event is counted and logged, then the
    rest of the batch is still processed. Log lines keep the batch order.
    """

    def __init__(self, subsystem: str, metrics: BaseMetrics):
        self._subsystem = subsystem
        self._metrics = metrics

    def _labels(self, handler: str, kind: str) -> dict[str, str]:
        return {"subsystem": self._subsystem, "handler": handler, "event": kind}

    def process(self, events: list[Event]) -> None:
        """Process a batch in order.

        Raises:
            BatchError: If at least one event failed validation.
        """
        handler = "process_events"
        errors: list[EventValidationError] = []

        for event in events:
            logger.info("Event", extra={"handler": handler, "event": event.kind})
            self._metrics.increment(HANDLER_TOTAL, self._labels(handler, event.kind))

            try:
                validated = validate(event)
            except EventValidationError as e:
                logger.error(str(e), extra={"handler": handler, "event": event.kind})
                self._metrics.increment(
                    HANDLER_FAILURES, self._labels(handler, event.kind)
                )
                errors.append(e)
                continue

            self.process_event(validated)

        if errors:
            raise BatchError(len(errors))

    def process_event(self, event: KindEvent) -> None:
        """Log the kind specific payload of a validated event."""
        logger.info(
            "Received",
            extra={"handler": "process_event", "event": event.kind, **event.log_fields()},
        )
