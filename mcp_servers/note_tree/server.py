"""
Note Tree MCP Server

Exposes the folder/note hierarchy (list, read, write, rename, create,
delete) plus the settings and reminders files via the Model Context
Protocol.  Runs on port 8005 with SSE transport.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from .config import settings
from .models import DeleteRequest, Node, NodeType, OperationResult
from .preferences import (
    Preferences,
    load_preferences,
    load_reminders,
    save_preferences,
    save_reminders,
)
from .storage import DocumentStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("note_tree")

# ---------------------------------------------------------------------------
# MCP server + storage
# ---------------------------------------------------------------------------
mcp = FastMCP("note-tree", host=settings.host, port=settings.port)
store = DocumentStore(settings.notes_dir)


def _result_dict(result: OperationResult) -> dict:
    """JSON-ready form of a store result, with the node in wire form."""
    data = result.model_dump(mode="json", exclude_none=True, exclude={"node"})
    node = getattr(result, "node", None)
    if node is not None:
        data["node"] = node.to_dict()
    return data


def _count_notes(tree: list[Node]) -> int:
    return sum(
        _count_notes(node.children or []) if node.is_folder else 1 for node in tree
    )


# ---------------------------------------------------------------------------
# Tools: tree and note content
# ---------------------------------------------------------------------------


@mcp.tool()
async def list_tree() -> dict:
    """Return the whole folder/note hierarchy.

    Folders come before notes at every level, each group ordered by title.
    Call this again after any change to see fresh ids and paths.

    Returns:
        Dictionary with the number of top-level entries and the nested tree.
    """
    tree = await store.list_tree()
    logger.info("Tool list_tree invoked — top-level entries=%d", len(tree))
    return {"count": len(tree), "tree": [node.to_dict() for node in tree]}


@mcp.tool()
async def read_note(path: str) -> dict:
    """Read the content of a note.

    Args:
        path: The note's path relative to the notes directory.

    Returns:
        Dictionary with the path and its content, or null content when the
        note cannot be read.
    """
    content = await store.read_note_content(path)
    logger.info("Tool read_note invoked — path='%s', found=%s", path, content is not None)
    return {"path": path, "content": content}


@mcp.tool()
async def write_note(path: str, content: str) -> dict:
    """Replace the content of an existing note.

    Args:
        path: The note's path relative to the notes directory.
        content: The serialised editor content to store.

    Returns:
        Dictionary with a success flag and, on failure, the error.
    """
    result = await store.write_note_content(path, content)
    logger.info("Tool write_note invoked — path='%s', success=%s", path, result.success)
    return _result_dict(result)


# ---------------------------------------------------------------------------
# Tools: structure
# ---------------------------------------------------------------------------


@mcp.tool()
async def rename_item(
    path: str, new_title: str, type: NodeType, id: Optional[str] = None
) -> dict:
    """Rename a folder or retitle a note.

    Renaming a folder changes its path and id and the paths of everything
    inside it.  Retitling a note keeps its id and path.

    Args:
        path: Current path of the item relative to the notes directory.
        new_title: The new name; unsupported characters are removed.
        type: Either "folder" or "note".
        id: Optional id of the item, used for logging only.

    Returns:
        Dictionary with a success flag and, on failure, the error.
    """
    result = await store.rename_item(path, new_title, type)
    logger.info(
        "Tool rename_item invoked — id=%s, path='%s', success=%s",
        id,
        path,
        result.success,
    )
    return _result_dict(result)


@mcp.tool()
async def create_note(parent_path: str = "", title: str = "") -> dict:
    """Create a new, empty note inside a folder.

    Args:
        parent_path: Folder path relative to the notes directory ("" for the top).
        title: Title of the note; defaults to "New Note" when unusable.

    Returns:
        Dictionary with success and the new node, or an error message.
    """
    result = await store.create_note(parent_path, title)
    logger.info("Tool create_note invoked — success=%s", result.success)
    return _result_dict(result)


@mcp.tool()
async def create_folder(parent_path: str, name: str) -> dict:
    """Create a new folder.

    Args:
        parent_path: Parent folder path relative to the notes directory.
        name: Folder name; must contain at least one supported character.

    Returns:
        Dictionary with success and the new folder path, or an error message
        such as "Failed to create folder: Folder already exists.".
    """
    result = await store.create_folder(parent_path, name)
    logger.info("Tool create_folder invoked — name='%s', success=%s", name, result.success)
    return _result_dict(result)


@mcp.tool()
async def delete_item(path: str, type: NodeType) -> dict:
    """Delete a note, or a folder together with everything inside it.

    Args:
        path: Item path relative to the notes directory.
        type: Either "folder" or "note".

    Returns:
        Dictionary with a success flag and, on failure, the error.
    """
    result = await store.delete_item(path, type)
    logger.info("Tool delete_item invoked — path='%s', success=%s", path, result.success)
    return _result_dict(result)


@mcp.tool()
async def delete_items(items: list[DeleteRequest]) -> dict:
    """Delete several notes and folders at once.

    All deletes run concurrently; the call returns once every one finished.

    Args:
        items: Entries with "path" and "type" ("folder" or "note").

    Returns:
        Dictionary with per-item results and the number that succeeded.
    """
    results = await store.delete_items(items)
    succeeded = sum(1 for r in results if r.success)
    logger.info("Tool delete_items invoked — requested=%d, deleted=%d", len(items), succeeded)
    return {
        "deleted": succeeded,
        "results": [
            {"path": item.path, **_result_dict(result)}
            for item, result in zip(items, results)
        ],
    }


# ---------------------------------------------------------------------------
# Tools: settings and reminders
# ---------------------------------------------------------------------------


@mcp.tool()
def load_settings() -> dict:
    """Return the user's settings (theme, notebookFont, language, timeZone)."""
    logger.info("Tool load_settings invoked")
    return load_preferences(settings.settings_file).model_dump(by_alias=True)


@mcp.tool()
def save_settings(prefs: dict[str, Any]) -> dict:
    """Store the user's settings.

    Args:
        prefs: Settings object; unknown keys are kept as-is.
    """
    saved = save_preferences(settings.settings_file, Preferences.model_validate(prefs))
    logger.info("Tool save_settings invoked — success=%s", saved)
    return {"success": saved}


@mcp.tool()
def get_reminders() -> dict:
    """Return the stored reminders list."""
    reminders = load_reminders(settings.reminders_file)
    logger.info("Tool get_reminders invoked — found=%d", len(reminders))
    return {"count": len(reminders), "reminders": reminders}


@mcp.tool()
def set_reminders(reminders: list[Any]) -> dict:
    """Replace the stored reminders list.

    Args:
        reminders: The full list of reminders to keep.
    """
    saved = save_reminders(settings.reminders_file, reminders)
    logger.info("Tool set_reminders invoked — count=%d, success=%s", len(reminders), saved)
    return {"success": saved}


@mcp.tool()
async def health_check() -> dict:
    """Check whether the Note Tree server is healthy.

    Returns:
        Dictionary with server status, notes directory, note count, and timestamp.
    """
    logger.info("Tool health_check invoked")
    tree = await store.list_tree()
    return {
        "status": "healthy",
        "server": "note-tree",
        "notes_dir": str(store.root),
        "total_notes": _count_notes(tree),
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info("Starting Note Tree MCP server on port %d ...", settings.port)
    mcp.run(transport="sse")
