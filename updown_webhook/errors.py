"""Exceptions raised while receiving updown.io webhooks."""

from fastapi import status


class WebhookError(Exception):
    """Base class for webhook processing errors."""


class ResolverError(WebhookError):
    """The provider IP whitelist could not be resolved."""


class AuthenticationError(WebhookError):
    """The request does not come from updown.io."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(WebhookError):
    """The request body is not a batch of events."""


class EventValidationError(WebhookError):
    """An event is missing the payload its kind requires."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind


class BatchError(WebhookError):
    """One or more events in a batch failed validation."""

    def __init__(self, invalid: int):
        self.invalid = invalid
        if invalid == 1:
            message = "1 event is invalid"
        else:
            message = f"{invalid} events are invalid"
        super().__init__(message)
