"""Selection continuity and tree helpers for the sidebar.

Nodes are rebuilt on every scan, so a selection is carried across scans
by ``id`` only: a note keeps its UUID through renames, while a folder's id
is its path and does not survive a rename.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from mcp_servers.note_tree.models import Node


def iter_nodes(tree: Iterable[Node]) -> Iterator[Node]:
    """Depth-first, pre-order walk over every node."""
    for node in tree:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def flatten_nodes(tree: Iterable[Node]) -> list[Node]:
    return list(iter_nodes(tree))


def find_node_by_id(tree: Iterable[Node], node_id: Optional[str]) -> Optional[Node]:
    if node_id is None:
        return None
    return next((node for node in iter_nodes(tree) if node.id == node_id), None)


def reconcile_selection(
    tree: Iterable[Node], previous_id: Optional[str]
) -> Optional[Node]:
    """Return the freshly scanned node for ``previous_id``, or ``None``."""
    return find_node_by_id(tree, previous_id)


def filter_tree(tree: list[Node], term: Optional[str]) -> list[Node]:
    """Keep nodes whose title contains ``term`` (case-insensitive).

    A matching folder keeps all of its children; a folder that does not
    match is kept only with its matching descendants.
    """
    if not term:
        return tree
    needle = term.lower()
    result: list[Node] = []
    for node in tree:
        match = needle in node.title.lower()
        if node.is_folder:
            children = filter_tree(node.children or [], term)
            if match or children:
                kept = node.children if match else children
                result.append(node.model_copy(update={"children": kept}))
        elif match:
            result.append(node)
    return result
