"""Exceptions shared between the pipeline and the adapters that serve it."""

from __future__ import annotations


class LookupFailedError(RuntimeError):
    """A directory lookup failed in a way that may succeed on a later attempt."""


class LookupNotFoundError(LookupFailedError):
    """The directory answered definitively that the key does not exist."""


class RetryExhaustedError(LookupFailedError):
    """Every attempt of a retry budget failed; carries the last failure's message."""

    def __init__(self, message: str, *, attempts: int, last_error: str) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class AddressExtractionError(ValueError):
    """No supported place-detail shape yielded a postal code."""


class SubmissionUnavailableError(RuntimeError):
    """The submission endpoint could not be reached or rejected the batch call."""


class SubmissionContractError(RuntimeError):
    """The submission endpoint answered with something that cannot be interpreted."""


class InvalidTransitionError(RuntimeError):
    """An item tried to move backwards or leave a terminal outcome."""
