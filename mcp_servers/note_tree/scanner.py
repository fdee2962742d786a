"""Recursive directory walk producing an ordered folder/note tree."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import anyio

from .documents import (
    HIDDEN_PREFIX,
    NOTE_SUFFIX,
    PathArg,
    ensure_directory,
    read_note_record,
)
from .errors import StoreError
from .metrics import SCAN_DURATION, SKIPPED_NOTE_FILES
from .models import Node

logger = logging.getLogger("note_tree.scanner")


def sort_key(node: Node) -> tuple:
    """Folders before notes, then case-insensitive title order."""
    return (0 if node.is_folder else 1, node.title.casefold(), node.title, node.path)


async def scan_tree(root: PathArg) -> list[Node]:
    """Walk ``root`` and return its top-level nodes, children nested.

    The root is created if missing.  Symbolic links are skipped.  Unreadable
    or corrupt note files are logged and skipped; an unreadable root raises
    ``OSError``.
    """
    base = anyio.Path(root)
    await ensure_directory(base)

    start = time.perf_counter()
    tree = await _scan_dir(base, base)
    elapsed = time.perf_counter() - start
    SCAN_DURATION.observe(elapsed)
    logger.debug("Scanned %s in %.1f ms", root, elapsed * 1000)
    return tree


async def _scan_dir(current: anyio.Path, base: anyio.Path) -> list[Node]:
    entries = [
        entry
        async for entry in current.iterdir()
        if not entry.name.startswith(HIDDEN_PREFIX)
    ]
    # Sibling sub-trees are read concurrently; order is restored by sorting.
    scanned = await asyncio.gather(*(_scan_entry(entry, base) for entry in entries))
    return sorted((node for node in scanned if node is not None), key=sort_key)


async def _scan_entry(entry: anyio.Path, base: anyio.Path) -> Optional[Node]:
    relative = entry.relative_to(base).as_posix()

    # Links are never followed: they can loop or point outside the root.
    if await entry.is_symlink():
        logger.debug("Skipping symbolic link %s", relative)
        return None

    if await entry.is_dir():
        try:
            children = await _scan_dir(entry, base)
        except OSError as exc:
            logger.error("Cannot list folder %s: %s", relative, exc)
            children = []
        return Node(
            id=relative,
            title=entry.name,
            type="folder",
            path=relative,
            children=children,
        )

    if entry.suffix == NOTE_SUFFIX and await entry.is_file():
        try:
            record = await read_note_record(entry)
        except StoreError as exc:
            SKIPPED_NOTE_FILES.inc()
            logger.error("Error reading note file %s: %s", relative, exc)
            return None
        return Node(
            id=record.id,
            title=record.title,
            type="note",
            path=relative,
            created_at=record.created_at,
        )

    return None
