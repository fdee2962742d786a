"""Error taxonomy for the note tree store."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure category carried by results."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_NAME = "invalid_name"
    CORRUPT_DOCUMENT = "corrupt_document"
    IO_FAILURE = "io_failure"


class StoreError(Exception):
    """Base class for every failure raised inside the store."""

    kind: ErrorKind = ErrorKind.IO_FAILURE


class NotFoundError(StoreError):
    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(StoreError):
    kind = ErrorKind.ALREADY_EXISTS


class InvalidNameError(StoreError):
    kind = ErrorKind.INVALID_NAME


class CorruptDocumentError(StoreError):
    kind = ErrorKind.CORRUPT_DOCUMENT


class IOFailureError(StoreError):
    kind = ErrorKind.IO_FAILURE


def from_os_error(exc: OSError, target: str) -> StoreError:
    """Map an ``OSError`` onto the store taxonomy."""
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(f"Not found: {target}")
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError(f"Already exists: {target}")
    return IOFailureError(f"{exc.strerror or exc} ({target})")
