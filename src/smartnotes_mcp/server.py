"""
MCP Server for SmartNotes.

Exposes the note repository and query engine as tools.
"""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from smartnotes.config import configure_logging, ensure_dirs, get_db_path, load_config
from smartnotes.db import NoteStore
from smartnotes.display import format_note_detail, format_note_list
from smartnotes.exceptions import SmartNotesError
from smartnotes.query import filter_sort, tag_index
from smartnotes.repository import NoteRepository

logger = logging.getLogger(__name__)

# Create MCP server
server = Server("smartnotes")

_repository: NoteRepository | None = None


def get_repository() -> NoteRepository:
    """Open the persistent repository on first use."""
    global _repository
    if _repository is None:
        config = load_config()
        ensure_dirs()
        _repository = NoteRepository(store=NoteStore(get_db_path(config)))
    return _repository


def set_repository(repo: NoteRepository | None) -> None:
    """Swap the repository used by the tools."""
    global _repository
    _repository = repo


NOTE_ID_SCHEMA = {
    "type": "object",
    "properties": {
        "note_id": {
            "type": "string",
            "description": "The ID of the note",
        },
    },
    "required": ["note_id"],
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="notes_create",
            description="Create a note with a title, body and optional tags.",
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Note title (may be empty)"},
                    "body": {"type": "string", "description": "Note body (may be empty)"},
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Tags to attach",
                    },
                    "color_hex": {"type": "string", "description": "Display colour, e.g. #FFCC00"},
                },
            },
        ),
        Tool(
            name="notes_list",
            description="List notes, pinned first then most recently updated. Optionally filter by exact tag and search text.",
            inputSchema={
                "type": "object",
                "properties": {
                    "tag": {"type": "string", "description": "Exact tag to filter by"},
                    "search": {
                        "type": "string",
                        "description": "Case-insensitive text matched against title, body and tags",
                    },
                },
            },
        ),
        Tool(
            name="notes_get",
            description="Show a single note.",
            inputSchema=NOTE_ID_SCHEMA,
        ),
        Tool(
            name="notes_update",
            description="Change the title, body, tags or colour of a note.",
            inputSchema={
                "type": "object",
                "properties": {
                    "note_id": {"type": "string", "description": "The ID of the note"},
                    "title": {"type": "string"},
                    "body": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "color_hex": {"type": ["string", "null"]},
                },
                "required": ["note_id"],
            },
        ),
        Tool(
            name="notes_toggle_pin",
            description="Pin or unpin a note.",
            inputSchema=NOTE_ID_SCHEMA,
        ),
        Tool(
            name="notes_delete",
            description="Delete a note.",
            inputSchema=NOTE_ID_SCHEMA,
        ),
        Tool(
            name="notes_tags",
            description="List the distinct tags in use.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    handler = TOOLS.get(name)
    if handler is None:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]
    try:
        return await handler(arguments or {})
    except (SmartNotesError, ValueError) as e:
        return [TextContent(type="text", text=f"Error: {e}")]


async def tool_create(args: dict) -> list[TextContent]:
    """Create a note."""
    note = get_repository().create(
        title=args.get("title", ""),
        body=args.get("body", ""),
        tags=args.get("tags") or [],
        color_hex=args.get("color_hex"),
    )
    return [TextContent(type="text", text=f"Created: {note.id}")]


async def tool_list(args: dict) -> list[TextContent]:
    """List notes."""
    tag = args.get("tag") or None
    search = args.get("search", "")
    notes = filter_sort(get_repository().list(), tag=tag, search=search)
    return [TextContent(type="text", text=format_note_list(notes, tag=tag, search=search))]


def resolve_note_id(args: dict) -> str:
    """Full note id from the note_id argument, which may be a listed prefix."""
    note_id = str(args.get("note_id") or "").strip()
    if not note_id:
        raise ValueError("No note_id provided")
    return get_repository().resolve(note_id)


async def tool_get(args: dict) -> list[TextContent]:
    """Show a note."""
    note = get_repository().get(resolve_note_id(args))
    return [TextContent(type="text", text=format_note_detail(note))]


async def tool_update(args: dict) -> list[TextContent]:
    """Edit a note."""
    note_id = resolve_note_id(args)
    fields = {
        key: args[key]
        for key in ("title", "body", "tags", "color_hex")
        if key in args
    }
    note = get_repository().update(note_id, **fields)
    return [TextContent(type="text", text=f"Updated: {note.id}")]


async def tool_toggle_pin(args: dict) -> list[TextContent]:
    """Pin or unpin a note."""
    note = get_repository().toggle_pin(resolve_note_id(args))
    state = "Pinned" if note.pinned else "Unpinned"
    return [TextContent(type="text", text=f"{state}: {note.id}")]


async def tool_delete(args: dict) -> list[TextContent]:
    """Delete a note."""
    note_id = resolve_note_id(args)
    get_repository().delete(note_id)
    return [TextContent(type="text", text=f"Deleted: {note_id}")]


async def tool_tags(args: dict) -> list[TextContent]:
    """List tags in use."""
    tags = tag_index(get_repository().list())
    if not tags:
        return [TextContent(type="text", text="No tags in use.")]
    return [TextContent(type="text", text="\n".join(tags))]


TOOLS = {
    "notes_create": tool_create,
    "notes_list": tool_list,
    "notes_get": tool_get,
    "notes_update": tool_update,
    "notes_toggle_pin": tool_toggle_pin,
    "notes_delete": tool_delete,
    "notes_tags": tool_tags,
}


async def main():
    """Run the MCP server."""
    configure_logging(load_config())
    logger.info("SmartNotes MCP server starting")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run() -> None:
    """Console script entry point."""
    import asyncio
    asyncio.run(main())


if __name__ == "__main__":
    run()
