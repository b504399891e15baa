"""Exception types shared across the results pipeline.

Upstream failures are not exceptions: the provider reports them as
outcomes. These types cover bad input and internal faults.
"""


class MatchweekError(Exception):
    """Base class for errors raised by this project."""


class ValidationError(MatchweekError):
    """Malformed input, from a caller or from the upstream payload."""


class UpstreamRecordError(ValidationError):
    """An upstream match record is missing a required field."""

    def __init__(self, message: str, record_id: object = None):
        super().__init__(message)
        self.record_id = record_id


class StoreError(MatchweekError):
    """The match store found its own state inconsistent."""
