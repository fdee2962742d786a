"""Async read/write helpers for individual note files."""

from __future__ import annotations

import logging
from os import PathLike
from typing import Union

import anyio
from pydantic import ValidationError

from .errors import CorruptDocumentError, from_os_error
from .models import NoteRecord

logger = logging.getLogger("note_tree.documents")

NOTE_SUFFIX = ".json"
HIDDEN_PREFIX = "."

PathArg = Union[str, PathLike, anyio.Path]


async def ensure_directory(path: PathArg) -> None:
    """Create ``path`` and its ancestors if absent. Idempotent."""
    try:
        await anyio.Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise from_os_error(exc, str(path)) from exc


async def read_note_record(path: PathArg) -> NoteRecord:
    """Load and validate a note file.

    Raises:
        NotFoundError / IOFailureError: the file could not be read.
        CorruptDocumentError: the file is not a valid note document.
    """
    target = anyio.Path(path)
    try:
        raw = await target.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptDocumentError(f"Note file is not UTF-8 text: {path}") from exc
    except OSError as exc:
        raise from_os_error(exc, str(path)) from exc

    try:
        return NoteRecord.model_validate_json(raw)
    except ValidationError as exc:
        raise CorruptDocumentError(
            f"Invalid note document {path}: {exc.error_count()} error(s)"
        ) from exc


async def write_note_record(path: PathArg, record: NoteRecord) -> None:
    """Serialise ``record`` to ``path``, replacing any existing file."""
    try:
        await anyio.Path(path).write_text(record.to_json(), encoding="utf-8")
    except OSError as exc:
        raise from_os_error(exc, str(path)) from exc
    logger.debug("Wrote note %s to %s", record.id, path)
