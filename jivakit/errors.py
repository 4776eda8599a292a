"""Errors shared by the object builders."""

from __future__ import annotations

from collections.abc import Iterable


class BuildError(Exception):
    """Raised when a builder holds errors at build time.

    ``errors`` keeps every problem that was collected while the object was
    being put together, in the order they were found.
    """

    def __init__(self, message: str, errors: Iterable[BaseException] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.errors: list[BaseException] = list(errors)

    def __str__(self) -> str:
        return self.message