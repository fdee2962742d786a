"""Notebook session: the sidebar's tree plus the current selection.

Every mutation goes through the document store, then the whole tree is
re-scanned and the selection is re-resolved by id against the new tree.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from mcp_servers.note_tree.models import (
    CreateFolderResult,
    CreateNoteResult,
    Node,
    OperationResult,
)
from mcp_servers.note_tree.storage import DocumentStore
from ui.selection import filter_tree, find_node_by_id, reconcile_selection

logger = logging.getLogger(__name__)


class NotebookSession:
    """Explicit application state for one store root."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self._tree: list[Node] = []
        self._selected: Optional[Node] = None

    @property
    def tree(self) -> list[Node]:
        return list(self._tree)

    @property
    def selected(self) -> Optional[Node]:
        return self._selected

    def select(self, node: Optional[Node]) -> None:
        self._selected = node

    def search(self, term: Optional[str]) -> list[Node]:
        return filter_tree(self._tree, term)

    async def refresh(self) -> list[Node]:
        """Re-scan the store and carry the selection over by id."""
        self._tree = await self.store.list_tree()
        if self._selected is not None:
            previous = self._selected
            self._selected = reconcile_selection(self._tree, previous.id)
            if self._selected is None:
                logger.info("Selection %s no longer in tree, cleared", previous.id)
        return self.tree

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def load_selected_content(self) -> str:
        """Editor content for the selection; empty for folders or nothing."""
        if self._selected is None or self._selected.is_folder:
            return ""
        content = await self.store.read_note_content(self._selected.path)
        return content or ""

    async def save_selected_content(self, content: str) -> OperationResult:
        if self._selected is None or self._selected.is_folder:
            return OperationResult(success=False, error="No note selected.")
        return await self.store.write_note_content(self._selected.path, content)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_note(self, parent_path: str, title: str) -> CreateNoteResult:
        """Create a note, refresh, and select the new note."""
        result = await self.store.create_note(parent_path, title)
        if result.success and result.node is not None:
            await self.refresh()
            self._selected = find_node_by_id(self._tree, result.node.id) or result.node
        return result

    async def create_folder(self, parent_path: str, name: str) -> CreateFolderResult:
        result = await self.store.create_folder(parent_path, name)
        if result.success:
            await self.refresh()
        return result

    async def rename(self, node: Node, new_title: str) -> OperationResult:
        """Rename ``node``; a blank or unchanged title does nothing."""
        if not new_title or new_title == node.title:
            return OperationResult.ok()
        result = await self.store.rename_item(node.path, new_title, node.type)
        await self.refresh()
        return result

    async def delete(self, node: Node) -> OperationResult:
        results = await self.delete_many([node])
        return results[0]

    async def delete_many(self, nodes: Iterable[Node]) -> list[OperationResult]:
        """Delete all ``nodes`` concurrently, then refresh once."""
        items = list(nodes)
        if not items:
            return []
        results = await self.store.delete_items(items)
        deleted_ids = {node.id for node in items}
        if self._selected is not None and self._selected.id in deleted_ids:
            self._selected = None
        await self.refresh()
        return results
