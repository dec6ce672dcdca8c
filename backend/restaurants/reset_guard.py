from __future__ import annotations

from .errors import AlreadyUsedError


class ResetGuard:
    """One-shot flag: pick counts may be bulk-reset once per session."""

    def __init__(self) -> None:
        self._used = False

    @property
    def used(self) -> bool:
        return self._used

    def check(self) -> None:
        if self._used:
            raise AlreadyUsedError()

    def mark_used(self) -> None:
        self._used = True
