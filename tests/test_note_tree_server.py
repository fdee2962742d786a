"""Tests for the Note Tree MCP server tools.

The tool functions are called directly against a store rooted in a
temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from mcp_servers.note_tree import server
from mcp_servers.note_tree.config import Settings
from mcp_servers.note_tree.errors import IOFailureError
from mcp_servers.note_tree.models import DeleteRequest
from mcp_servers.note_tree.storage import DocumentStore


@pytest.fixture(autouse=True)
def tmp_server(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Point the module-level settings and store at a temp data dir."""
    test_settings = Settings(data_dir=tmp_path)
    monkeypatch.setattr(server, "settings", test_settings)
    monkeypatch.setattr(server, "store", DocumentStore(test_settings.notes_dir))
    return test_settings


class TestTreeTools:
    @pytest.mark.asyncio
    async def test_empty_tree(self) -> None:
        data = await server.list_tree()
        assert data == {"count": 0, "tree": []}

    @pytest.mark.asyncio
    async def test_tree_wire_format(self) -> None:
        await server.create_folder("", "Work")
        created = await server.create_note("Work", "Todo")

        data = await server.list_tree()

        [work] = data["tree"]
        assert work == {
            "id": "Work",
            "title": "Work",
            "type": "folder",
            "path": "Work",
            "children": [created["node"]],
        }
        note = created["node"]
        assert set(note) == {"id", "title", "type", "path", "createdAt"}
        assert "children" not in note

    @pytest.mark.asyncio
    async def test_result_is_json_serialisable(self) -> None:
        await server.create_note("", "A")
        json.dumps(await server.list_tree())


class TestContentTools:
    @pytest.mark.asyncio
    async def test_write_then_read(self) -> None:
        created = await server.create_note("", "Todo")
        path = created["node"]["path"]

        written = await server.write_note(path, "<p>buy milk</p>")
        read = await server.read_note(path)

        assert written == {"success": True}
        assert read == {"path": path, "content": "<p>buy milk</p>"}

    @pytest.mark.asyncio
    async def test_read_missing(self) -> None:
        data = await server.read_note("missing.json")
        assert data["content"] is None

    @pytest.mark.asyncio
    async def test_write_missing_reports_error(self) -> None:
        data = await server.write_note("missing.json", "x")
        assert data["success"] is False
        assert data["error_kind"] == "not_found"


class TestStructureTools:
    @pytest.mark.asyncio
    async def test_create_folder_duplicate(self) -> None:
        first = await server.create_folder("", "Work")
        second = await server.create_folder("", "Work")
        assert first["success"] is True
        assert first["path"] == "Work"
        assert second == {
            "success": False,
            "error": "Failed to create folder: Folder already exists.",
            "error_kind": "already_exists",
        }

    @pytest.mark.asyncio
    async def test_create_folder_invalid_name(self) -> None:
        data = await server.create_folder("", "!!!")
        assert data["error"] == "Invalid folder name provided."

    @pytest.mark.asyncio
    async def test_create_note_defaults_to_root(self) -> None:
        data = await server.create_note()
        assert data["success"] is True
        assert data["node"]["title"] == "New Note"
        assert "/" not in data["node"]["path"]

    @pytest.mark.asyncio
    async def test_rename_note_keeps_id(self) -> None:
        node = (await server.create_note("", "Draft"))["node"]

        result = await server.rename_item(node["path"], "Final", "note", id=node["id"])

        assert result == {"success": True}
        [renamed] = (await server.list_tree())["tree"]
        assert renamed["id"] == node["id"]
        assert renamed["title"] == "Final"

    @pytest.mark.asyncio
    async def test_delete_item(self) -> None:
        await server.create_folder("", "Work")
        result = await server.delete_item("Work", "folder")
        assert result == {"success": True}
        assert (await server.list_tree())["count"] == 0

    @pytest.mark.asyncio
    async def test_delete_items(self) -> None:
        a = (await server.create_note("", "a"))["node"]
        await server.create_folder("", "Work")

        data = await server.delete_items(
            [
                DeleteRequest(path=a["path"], type="note"),
                DeleteRequest(path="Work", type="folder"),
                DeleteRequest(path="ghost.json", type="note"),
            ]
        )

        assert data["deleted"] == 2
        assert [r["success"] for r in data["results"]] == [True, True, False]
        assert data["results"][2]["path"] == "ghost.json"


class TestSettingsTools:
    def test_defaults_when_missing(self) -> None:
        data = server.load_settings()
        assert data["theme"] == "dark"
        assert data["notebookFont"] == "sans"
        assert data["language"] == "en"
        assert data["timeZone"]

    def test_save_then_load(self, tmp_server: Settings) -> None:
        saved = server.save_settings(
            {"theme": "light", "notebookFont": "serif", "language": "es", "timeZone": "UTC"}
        )
        assert saved == {"success": True}
        assert server.load_settings() == {
            "theme": "light",
            "notebookFont": "serif",
            "language": "es",
            "timeZone": "UTC",
        }
        assert tmp_server.settings_file.exists()

    def test_reminders_round_trip(self) -> None:
        assert server.get_reminders() == {"count": 0, "reminders": []}
        reminder = {"id": 1, "text": "Call mom", "time": "2024-05-01T09:00"}
        assert server.set_reminders([reminder]) == {"success": True}
        assert server.get_reminders() == {"count": 1, "reminders": [reminder]}


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_health_counts_nested_notes(self, tmp_server: Settings) -> None:
        await server.create_note("", "top")
        await server.create_note("A/B", "deep")
        await server.create_folder("", "Empty")

        data = await server.health_check()

        assert data["status"] == "healthy"
        assert data["server"] == "note-tree"
        assert data["total_notes"] == 2
        assert data["notes_dir"] == str(tmp_server.notes_dir)
        assert "timestamp" in data


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_unreadable_root_lists_empty(self) -> None:
        """An OSError from the scan degrades to an empty tree."""
        with patch(
            "mcp_servers.note_tree.storage.scan_tree",
            new_callable=AsyncMock,
            side_effect=PermissionError(13, "Permission denied"),
        ):
            data = await server.list_tree()
        assert data == {"count": 0, "tree": []}

    @pytest.mark.asyncio
    async def test_write_io_failure_reported(self) -> None:
        path = (await server.create_note("", "Locked"))["node"]["path"]

        with patch(
            "mcp_servers.note_tree.storage.write_note_record",
            new_callable=AsyncMock,
            side_effect=IOFailureError("disk full"),
        ):
            data = await server.write_note(path, "x")

        assert data == {
            "success": False,
            "error": "disk full",
            "error_kind": "io_failure",
        }
