from __future__ import annotations


class LunchPickerError(Exception):
    """Base class for every error raised by the lunch picker."""


class RecordValidationError(LunchPickerError):
    """A raw store record does not have the expected shape."""


class InvalidInputError(LunchPickerError):
    """An operation was called with input it cannot work with."""


class AlreadyUsedError(LunchPickerError):
    """The one-shot reset has already been used this session."""

    def __init__(self, message: str = "Pick counts have already been reset this session") -> None:
        super().__init__(message)


class WriteInProgressError(LunchPickerError):
    """Another pick or reset is still waiting on the store."""

    def __init__(self, message: str = "Another update is still in progress") -> None:
        super().__init__(message)


class NetworkError(LunchPickerError):
    """A call to the remote store failed."""


class LoadFailedError(NetworkError):
    """The initial load failed even after retrying."""

    def __init__(self, message: str = "Failed to load restaurants. Please refresh the page.") -> None:
        super().__init__(message)


class StoreConfigError(LunchPickerError):
    """The store endpoint or access key is missing."""
