"""Tests for the MCP tool handlers."""
import asyncio
import re

import pytest

from smartnotes.models import sample_notes
from smartnotes_mcp import server


@pytest.fixture(autouse=True)
def mcp_repo(repo):
    """Point the tools at the in-memory repository."""
    server.set_repository(repo)
    yield repo
    server.set_repository(None)


def call(name, arguments=None) -> str:
    result = asyncio.run(server.call_tool(name, arguments or {}))
    return result[0].text


def test_tools_are_registered():
    names = {tool.name for tool in asyncio.run(server.list_tools())}
    assert names == set(server.TOOLS)


def test_create_and_list(mcp_repo):
    text = call("notes_create", {"title": "Grocery List", "body": "Milk", "tags": ["errands"]})
    assert text.startswith("Created: ")
    note_id = text.split(": ", 1)[1]
    assert mcp_repo.get(note_id).tags == ("errands",)

    assert "Grocery List" in call("notes_list", {"search": "milk"})
    assert "No notes matching" in call("notes_list", {"search": "bread"})
    assert "Grocery List" in call("notes_list", {"tag": "errands"})


def test_update_pin_delete(mcp_repo):
    note = mcp_repo.create("Draft")
    assert call("notes_update", {"note_id": note.id, "title": "Final"}) == f"Updated: {note.id}"
    assert mcp_repo.get(note.id).title == "Final"

    assert call("notes_toggle_pin", {"note_id": note.id}) == f"Pinned: {note.id}"
    assert "Final" in call("notes_get", {"note_id": note.id})

    assert call("notes_delete", {"note_id": note.id}) == f"Deleted: {note.id}"
    assert note.id not in mcp_repo


def test_missing_note_reports_error():
    assert call("notes_delete", {"note_id": "missing"}) == "Error: Note not found: missing"
    assert call("notes_update", {"note_id": ""}) == "Error: No note_id provided"


def test_invalid_update_reports_error(mcp_repo):
    note = mcp_repo.create("Draft")
    assert call("notes_update", {"note_id": note.id, "color_hex": "nope"}).startswith("Error: ")


def test_tags(mcp_repo):
    assert call("notes_tags") == "No tags in use."
    mcp_repo.create("a", tags=["b", "a"])
    mcp_repo.create("b", tags=["a", "c"])
    assert call("notes_tags") == "a\nb\nc"


def test_unknown_tool():
    assert call("nope") == "Unknown tool: nope"


def listed_id(listing: str, title: str) -> str:
    """The short id printed on the row for `title`."""
    for line in listing.splitlines():
        if title in line:
            return re.search(r"▌ (\w+)  ", line).group(1)
    raise AssertionError(f"{title} not listed")


def test_ids_from_listing_reach_imported_notes(mcp_repo):
    notes = mcp_repo.import_notes(sample_notes())
    grocery = next(n for n in notes if n.title == "Grocery List")

    short_id = listed_id(call("notes_list"), "Grocery List")
    assert short_id != grocery.id
    assert grocery.id.startswith(short_id)

    assert "Milk, Bread, Eggs" in call("notes_get", {"note_id": short_id})
    assert call("notes_toggle_pin", {"note_id": short_id}) == f"Pinned: {grocery.id}"
    assert call("notes_update", {"note_id": short_id, "body": "Oat milk"}) == f"Updated: {grocery.id}"
    assert mcp_repo.get(grocery.id).body == "Oat milk"
    assert call("notes_delete", {"note_id": short_id}) == f"Deleted: {grocery.id}"
    assert grocery.id not in mcp_repo


def test_null_note_id_reports_error():
    for tool in ("notes_get", "notes_update", "notes_toggle_pin", "notes_delete"):
        assert call(tool, {"note_id": None}) == "Error: No note_id provided"
