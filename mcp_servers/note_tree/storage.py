"""Filesystem-backed document store for the folder/note hierarchy.

Folders are directories and notes are ``<uuid>.json`` files below a single
store root.  The store keeps no tree in memory: every call works against
the current state of the disk and callers re-scan after each mutation.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Iterable, Optional, Protocol

import anyio
from anyio import to_thread

from .documents import (
    NOTE_SUFFIX,
    ensure_directory,
    read_note_record,
    write_note_record,
)
from .errors import (
    AlreadyExistsError,
    ErrorKind,
    InvalidNameError,
    NotFoundError,
    StoreError,
    from_os_error,
)
from .metrics import STORE_OPERATIONS
from .models import (
    CreateFolderResult,
    CreateNoteResult,
    Node,
    NodeType,
    NoteRecord,
    OperationResult,
)
from .sanitizer import DEFAULT_NOTE_TITLE, DEFAULT_RENAME_TITLE, sanitize_name
from .scanner import scan_tree

logger = logging.getLogger("note_tree.storage")


class Addressable(Protocol):
    """Anything carrying a store-relative ``path`` and a node ``type``."""

    path: str
    type: NodeType


def _ignore_missing(func, target, exc: BaseException) -> None:
    # Entries removed concurrently (e.g. by a bulk delete) are already gone.
    if not isinstance(exc, FileNotFoundError):
        raise exc


def _remove_tree(path: Path) -> None:
    """Remove ``path`` recursively; a missing top-level folder is a no-op."""
    if not os.path.lexists(path):
        return
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_ignore_missing)
    else:
        shutil.rmtree(
            path, onerror=lambda func, target, info: _ignore_missing(func, target, info[1])
        )


class DocumentStore:
    """CRUD operations over the note hierarchy rooted at ``root``."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_tree(self) -> list[Node]:
        """Scan the store and return the ordered tree. ``[]`` on failure."""
        try:
            tree = await scan_tree(self._root)
        except (StoreError, OSError) as exc:
            logger.error("Failed to scan notes directory %s: %s", self._root, exc)
            STORE_OPERATIONS.labels(operation="list_tree", status="error").inc()
            return []
        STORE_OPERATIONS.labels(operation="list_tree", status="success").inc()
        return tree

    async def read_note_content(self, path: str) -> Optional[str]:
        """Return the ``content`` of the note at ``path``, or ``None``."""
        try:
            await self._ensure_root()
            record = await read_note_record(self._resolve(path))
        except StoreError as exc:
            logger.error("Error reading note at %s: %s", path, exc)
            STORE_OPERATIONS.labels(operation="read_note", status="error").inc()
            return None
        STORE_OPERATIONS.labels(operation="read_note", status="success").inc()
        return record.content

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def write_note_content(self, path: str, content: str) -> OperationResult:
        """Replace only the ``content`` field of an existing note file."""
        try:
            await self._ensure_root()
            target = self._resolve(path)
            record = await read_note_record(target)
            record.content = content
            await write_note_record(target, record)
        except StoreError as exc:
            logger.error("Error saving note at %s: %s", path, exc)
            return self._failed("write_note", exc)
        return self._succeeded("write_note")

    async def rename_item(
        self,
        old_path: str,
        new_title: Optional[str],
        node_type: NodeType,
    ) -> OperationResult:
        """Rename a folder on disk, or retitle a note inside its file.

        A folder rename changes the path (and therefore the id) of the
        folder and of everything below it.  A note keeps its path and id.
        """
        try:
            await self._ensure_root()
            source = self._resolve(old_path)
            title = sanitize_name(new_title, DEFAULT_RENAME_TITLE)
            if node_type == "folder":
                await self._rename_folder(source, title)
            else:
                await self._retitle_note(source, title)
        except StoreError as exc:
            logger.error("Error renaming %s %s: %s", node_type, old_path, exc)
            return self._failed("rename_item", exc)
        return self._succeeded("rename_item")

    async def create_note(
        self, parent_path: Optional[str], title: Optional[str]
    ) -> CreateNoteResult:
        """Create an empty note under ``parent_path`` and describe it."""
        try:
            await self._ensure_root()
            parent = self._resolve(parent_path)
            record = NoteRecord.new(sanitize_name(title, DEFAULT_NOTE_TITLE))
            await ensure_directory(parent)
            target = parent / f"{record.id}{NOTE_SUFFIX}"
            await write_note_record(target, record)
        except StoreError as exc:
            logger.error("Error creating new note: %s", exc)
            STORE_OPERATIONS.labels(operation="create_note", status="error").inc()
            return CreateNoteResult.failed(exc, f"Failed to create note: {exc}")

        node = Node(
            id=record.id,
            title=record.title,
            type="note",
            path=self._relative(target),
            created_at=record.created_at,
        )
        logger.info("Created note %s (%s) at %s", node.id, node.title, node.path)
        STORE_OPERATIONS.labels(operation="create_note", status="success").inc()
        return CreateNoteResult.ok(node=node)

    async def create_folder(
        self, parent_path: Optional[str], name: Optional[str]
    ) -> CreateFolderResult:
        """Create the folder ``name`` under ``parent_path``.

        An unusable name fails before the filesystem is touched.  An
        existing entry at the target is reported as ``already_exists``.
        """
        try:
            folder_name = sanitize_name(name)
        except InvalidNameError as exc:
            logger.warning("Rejected folder name %r", name)
            STORE_OPERATIONS.labels(operation="create_folder", status="error").inc()
            return CreateFolderResult.failed(exc)

        try:
            await self._ensure_root()
            target = anyio.Path(self._resolve(parent_path) / folder_name)
            if await target.exists():
                raise AlreadyExistsError("Folder already exists.")
            try:
                await target.mkdir(parents=True)
            except OSError as exc:
                raise from_os_error(exc, str(target)) from exc
        except StoreError as exc:
            logger.error("Error creating folder %s in %s: %s", folder_name, parent_path, exc)
            STORE_OPERATIONS.labels(operation="create_folder", status="error").inc()
            cause = (
                "Folder already exists."
                if exc.kind is ErrorKind.ALREADY_EXISTS
                else str(exc)
            )
            return CreateFolderResult.failed(exc, f"Failed to create folder: {cause}")

        relative = self._relative(Path(target))
        logger.info("Created folder %s", relative)
        STORE_OPERATIONS.labels(operation="create_folder", status="success").inc()
        return CreateFolderResult.ok(
            path=relative,
            message=f"Folder '{folder_name}' created successfully.",
        )

    async def delete_item(self, path: str, node_type: NodeType) -> OperationResult:
        """Delete a note file, or a folder and everything below it.

        Deleting a folder that is already gone counts as success.
        """
        try:
            await self._ensure_root()
            target = self._resolve(path)
            if target == self._root.resolve():
                raise InvalidNameError("The store root cannot be deleted")
            try:
                if node_type == "folder":
                    await to_thread.run_sync(_remove_tree, target)
                else:
                    await anyio.Path(target).unlink()
            except OSError as exc:
                raise from_os_error(exc, path) from exc
        except StoreError as exc:
            logger.error("Error deleting item at %s: %s", path, exc)
            return self._failed("delete_item", exc)
        logger.info("Deleted %s %s", node_type, path)
        return self._succeeded("delete_item")

    async def delete_items(self, items: Iterable[Addressable]) -> list[OperationResult]:
        """Delete every item concurrently and wait for all of them."""
        return list(
            await asyncio.gather(
                *(self.delete_item(item.path, item.type) for item in items)
            )
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _ensure_root(self) -> None:
        await ensure_directory(self._root)

    def _resolve(self, relative: Optional[str]) -> Path:
        """Absolute path for a store-relative path; must stay inside the root."""
        root = self._root.resolve()
        target = (root / (relative or "")).resolve()
        if target != root and root not in target.parents:
            raise InvalidNameError(f"Path escapes the store root: {relative}")
        return target

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._root.resolve()).as_posix()

    async def _rename_folder(self, source: Path, title: str) -> None:
        if source == self._root.resolve():
            raise InvalidNameError("The store root cannot be renamed")
        destination = source.with_name(title)
        if destination == source:
            return

        src = anyio.Path(source)
        dst = anyio.Path(destination)
        if not await src.is_dir():
            raise NotFoundError(f"Folder not found: {self._relative(source)}")
        # A case-only rename on a case-insensitive filesystem hits itself.
        if await dst.exists() and not await dst.samefile(source):
            raise AlreadyExistsError(f"Already exists: {self._relative(destination)}")
        try:
            await src.rename(destination)
        except OSError as exc:
            raise from_os_error(exc, self._relative(source)) from exc
        logger.info(
            "Renamed folder %s -> %s",
            self._relative(source),
            self._relative(destination),
        )

    async def _retitle_note(self, source: Path, title: str) -> None:
        record = await read_note_record(source)
        record.title = title
        await write_note_record(source, record)
        logger.info("Retitled note %s to %r", record.id, title)

    def _succeeded(self, operation: str) -> OperationResult:
        STORE_OPERATIONS.labels(operation=operation, status="success").inc()
        return OperationResult.ok()

    def _failed(self, operation: str, exc: StoreError) -> OperationResult:
        STORE_OPERATIONS.labels(operation=operation, status="error").inc()
        return OperationResult.failed(exc)
