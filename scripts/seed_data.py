"""Seed a notebook with realistic folders and notes for screenshots.

Creates a small hierarchy (nested folders, notes with HTML content) plus
default settings and a couple of reminders, directly on disk through the
document store.  Nothing needs to be running.

Usage:
    python scripts/seed_data.py [--data-dir ~/.notezone-demo]
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from mcp_servers.note_tree.config import Settings
from mcp_servers.note_tree.preferences import (
    Preferences,
    save_preferences,
    save_reminders,
)
from mcp_servers.note_tree.storage import DocumentStore

# Each entry: (parent folder, title, html content)
NOTES: list[tuple[str, str, str]] = [
    # --- Top level (2) ---
    ("", "Welcome", "<h1>Welcome</h1><p>Folders on the left, notes on the right.</p>"),
    ("", "Shopping list", "<ul><li>Coffee</li><li>Oat milk</li><li>Basil</li></ul>"),
    # --- Work (3) ---
    ("Work", "Roadmap", "<h2>Q3</h2><p>Ship bulk delete and search.</p>"),
    ("Work/Meetings", "Standup 2024-05-02", "<p>Blocked on the sync design review.</p>"),
    ("Work/Meetings", "Retro", "<p>Keep: pairing. Drop: late deploys.</p>"),
    # --- Recipes (2) ---
    ("Recipes", "Pasta al pomodoro", "<p>San Marzano tomatoes, garlic, basil.</p>"),
    ("Recipes/Baking", "Sourdough", "<p>Levain at 9am, bulk until 3pm.</p>"),
]

FOLDERS = ["Work", "Work/Meetings", "Recipes", "Recipes/Baking", "Archive"]

REMINDERS = [
    {"id": 1, "text": "Water the plants", "time": "2024-05-03T08:00"},
    {"id": 2, "text": "Submit expense report", "time": "2024-05-06T17:00"},
]


async def seed(store: DocumentStore) -> int:
    """Create all folders and notes, returning the number of failures."""
    failures = 0

    for i, folder in enumerate(FOLDERS, 1):
        parent, _, name = folder.rpartition("/")
        result = await store.create_folder(parent, name)
        status = "OK" if result.success else f"SKIP ({result.error})"
        print(f"  [{i}/{len(FOLDERS)}] Folder {folder:<20} {status}")

    print()
    for i, (parent, title, content) in enumerate(NOTES, 1):
        created = await store.create_note(parent, title)
        if not created.success:
            failures += 1
            print(f"  [{i}/{len(NOTES)}] Note   {title:<20} ERROR: {created.error}")
            continue
        written = await store.write_note_content(created.node.path, content)
        if not written.success:
            failures += 1
            print(f"  [{i}/{len(NOTES)}] Note   {title:<20} ERROR: {written.error}")
            continue
        print(f"  [{i}/{len(NOTES)}] Note   {title:<20} {created.node.path}")

    return failures


def main() -> None:
    """Seed the notebook at the configured (or given) data directory."""
    parser = argparse.ArgumentParser(description="Seed a demo notebook")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Data directory (default: NOTEZONE_DATA_DIR or ~/.notezone)",
    )
    args = parser.parse_args()
    cfg = Settings(data_dir=args.data_dir) if args.data_dir else Settings()

    print(f"\n  Seeding notebook in {cfg.notes_dir}")
    print("  =" * 30)
    print()

    start = time.time()
    store = DocumentStore(cfg.notes_dir)
    failures = asyncio.run(seed(store))

    save_preferences(cfg.settings_file, Preferences())
    save_reminders(cfg.reminders_file, REMINDERS)

    tree = asyncio.run(store.list_tree())

    # Summary
    print()
    print("  " + "=" * 58)
    print(f"  Done! {len(NOTES) - failures}/{len(NOTES)} notes written.")
    print(f"  Top-level entries: {[node.title for node in tree]}")
    print(f"  Reminders: {len(REMINDERS)}")
    print(f"  Time: {time.time() - start:.2f}s")
    print()

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
