"""Tests for ui.session — selection continuity across re-scans."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcp_servers.note_tree.storage import DocumentStore
from ui.session import NotebookSession


@pytest.fixture()
def session(tmp_path: Path) -> NotebookSession:
    """Return a NotebookSession over an empty temp store."""
    return NotebookSession(DocumentStore(tmp_path / "Notes"))


class TestRefresh:
    @pytest.mark.asyncio
    async def test_initial_refresh_empty(self, session: NotebookSession) -> None:
        assert await session.refresh() == []
        assert session.selected is None

    @pytest.mark.asyncio
    async def test_external_change_picked_up(self, session: NotebookSession) -> None:
        await session.store.create_note("", "Written elsewhere")
        tree = await session.refresh()
        assert [n.title for n in tree] == ["Written elsewhere"]


class TestCreate:
    @pytest.mark.asyncio
    async def test_new_note_becomes_selection(self, session: NotebookSession) -> None:
        result = await session.create_note("", "Ideas")
        assert result.success
        assert session.selected is not None
        assert session.selected.id == result.node.id
        assert session.selected in session.tree

    @pytest.mark.asyncio
    async def test_failed_folder_leaves_tree(self, session: NotebookSession) -> None:
        await session.create_folder("", "Work")
        result = await session.create_folder("", "Work")
        assert not result.success
        assert [n.title for n in session.tree] == ["Work"]


class TestRenameSelection:
    @pytest.mark.asyncio
    async def test_note_selection_survives_rename(
        self, session: NotebookSession
    ) -> None:
        created = await session.create_note("", "Draft")
        selected = session.selected

        await session.rename(selected, "Final")

        assert session.selected is not None
        assert session.selected.id == created.node.id
        assert session.selected.title == "Final"
        assert session.selected is not selected

    @pytest.mark.asyncio
    async def test_folder_rename_clears_selection(
        self, session: NotebookSession
    ) -> None:
        await session.create_folder("", "Work")
        [work] = session.tree
        session.select(work)

        await session.rename(work, "Jobs")

        assert session.selected is None
        assert [n.id for n in session.tree] == ["Jobs"]

    @pytest.mark.asyncio
    async def test_note_inside_renamed_folder_stays_selected(
        self, session: NotebookSession
    ) -> None:
        await session.create_folder("", "Work")
        created = await session.create_note("Work", "Todo")
        [work] = session.tree

        await session.rename(work, "Jobs")

        assert session.selected.id == created.node.id
        assert session.selected.path == f"Jobs/{created.node.id}.json"

    @pytest.mark.asyncio
    async def test_unchanged_title_is_noop(self, session: NotebookSession) -> None:
        await session.create_note("", "Same")
        result = await session.rename(session.selected, "Same")
        assert result.success


class TestContent:
    @pytest.mark.asyncio
    async def test_save_and_load_selected(self, session: NotebookSession) -> None:
        await session.create_note("", "Journal")
        saved = await session.save_selected_content("<p>today</p>")
        assert saved.success
        assert await session.load_selected_content() == "<p>today</p>"

    @pytest.mark.asyncio
    async def test_folder_selection_has_no_content(
        self, session: NotebookSession
    ) -> None:
        await session.create_folder("", "Work")
        session.select(session.tree[0])
        assert await session.load_selected_content() == ""
        result = await session.save_selected_content("ignored")
        assert not result.success

    @pytest.mark.asyncio
    async def test_nothing_selected(self, session: NotebookSession) -> None:
        assert await session.load_selected_content() == ""


class TestDelete:
    @pytest.mark.asyncio
    async def test_deleting_selection_clears_it(self, session: NotebookSession) -> None:
        await session.create_note("", "Temp")
        result = await session.delete(session.selected)
        assert result.success
        assert session.selected is None
        assert session.tree == []

    @pytest.mark.asyncio
    async def test_deleting_parent_folder_clears_selection(
        self, session: NotebookSession
    ) -> None:
        await session.create_folder("", "Work")
        await session.create_note("Work", "Inside")
        [work] = session.tree

        await session.delete(work)

        assert session.selected is None

    @pytest.mark.asyncio
    async def test_delete_many_keeps_unrelated_selection(
        self, session: NotebookSession
    ) -> None:
        await session.create_note("", "a")
        await session.create_note("", "b")
        keep = await session.create_note("", "c")
        doomed = [n for n in session.tree if n.title in ("a", "b")]

        results = await session.delete_many(doomed)

        assert all(r.success for r in results)
        assert [n.title for n in session.tree] == ["c"]
        assert session.selected.id == keep.node.id

    @pytest.mark.asyncio
    async def test_delete_many_empty(self, session: NotebookSession) -> None:
        assert await session.delete_many([]) == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_current_tree(self, session: NotebookSession) -> None:
        await session.create_folder("", "Recipes")
        await session.create_note("Recipes", "Pasta")
        await session.create_note("", "Groceries")

        result = session.search("pasta")

        [recipes] = result
        assert [c.title for c in recipes.children] == ["Pasta"]
