"""
CLI for SmartNotes.

Minimal CLI using stdlib argument handling.
Subcommands are imported lazily to keep startup fast.

Usage:
    smartnotes new "Title" "Body"   # Create a note
    smartnotes list --tag work      # List notes
    smartnotes --help               # Show help
"""

import sys


def print_help() -> None:
    """Print help message."""
    print("""smartnotes - small single-user note keeper

Usage:
    smartnotes new <title> [body] [--tag T]... [--color HEX]
                                        Create a note
    smartnotes list [--tag T] [--search S] [--limit N]
                                        List notes, pinned first
    smartnotes show <id>                Show a note
    smartnotes edit <id> [--title T] [--body B] [--tags a,b] [--color HEX|none]
                                        Edit a note
    smartnotes pin <id>                 Toggle pinned
    smartnotes delete <id>              Delete a note
    smartnotes tags                     List tags in use
    smartnotes export                   Print all notes as JSON
    smartnotes import <file>            Add notes from an export file
    smartnotes seed                     Add the sample notes
    smartnotes stats                    Show database statistics

Options:
    smartnotes --help, -h               Show this help
    smartnotes --version, -v            Show version

Ids may be abbreviated to any unique prefix.

Examples:
    smartnotes new "Grocery List" "Milk, Bread, Eggs" --tag errands
    smartnotes list --search milk
    smartnotes pin 3f2a""")


def print_version() -> None:
    """Print version."""
    from smartnotes import __version__
    print(f"smartnotes {__version__}")


def open_repository():
    """Load config, set up logging and open the persistent repository."""
    import os

    from smartnotes.config import configure_logging, ensure_dirs, get_db_path, load_config
    from smartnotes.db import NoteStore
    from smartnotes.repository import NoteRepository

    config = load_config()
    configure_logging(config)
    if not config.get("display", {}).get("color", True):
        os.environ["NO_COLOR"] = "1"

    ensure_dirs()
    return NoteRepository(store=NoteStore(get_db_path(config))), config


def parse_options(args: list[str], repeatable: tuple[str, ...] = ()) -> tuple[list[str], dict]:
    """
    Split args into positionals and --name value options.

    Options named in `repeatable` collect into lists.
    """
    positionals: list[str] = []
    options: dict = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg.startswith("--") and i + 1 < len(args):
            name = arg[2:]
            if name in repeatable:
                options.setdefault(name, []).append(args[i + 1])
            else:
                options[name] = args[i + 1]
            i += 2
        elif arg.startswith("--"):
            raise ValueError(f"Missing value for {arg}")
        else:
            positionals.append(arg)
            i += 1
    return positionals, options


def split_tags(value: str) -> list[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def cmd_new(args: list[str]) -> int:
    """Create a note."""
    from smartnotes.display import format_note_detail

    positionals, options = parse_options(args, repeatable=("tag",))
    title = positionals[0] if positionals else ""
    body = " ".join(positionals[1:])

    repo, _ = open_repository()
    note = repo.create(
        title=title,
        body=body,
        tags=options.get("tag", []),
        color_hex=options.get("color"),
    )
    print(format_note_detail(note))
    return 0


def cmd_list(args: list[str]) -> int:
    """List notes with optional tag and search filters."""
    from smartnotes.display import format_note_list, format_tag_chips
    from smartnotes.query import filter_sort, tag_index

    _, options = parse_options(args)
    tag = options.get("tag")
    search = options.get("search", "")

    repo, config = open_repository()
    limit = int(options.get("limit", config.get("display", {}).get("list_limit", 50)))

    snapshot = repo.list()
    notes = filter_sort(snapshot, tag=tag, search=search)

    chips = tag_index(snapshot)
    if chips:
        print(format_tag_chips(chips, selected=tag))
        print()
    print(format_note_list(notes, tag=tag, search=search, limit=limit))
    return 0


def cmd_show(args: list[str]) -> int:
    """Show a single note."""
    from smartnotes.display import format_note_detail

    if not args:
        print("Usage: smartnotes show <id>", file=sys.stderr)
        return 1

    repo, _ = open_repository()
    note = repo.get(repo.resolve(args[0]))
    print(format_note_detail(note))
    return 0


def cmd_edit(args: list[str]) -> int:
    """Edit title, body, tags or colour."""
    from smartnotes.display import format_note_detail

    positionals, options = parse_options(args)
    if not positionals:
        print("Usage: smartnotes edit <id> [--title T] [--body B] [--tags a,b] [--color HEX]",
              file=sys.stderr)
        return 1

    fields: dict = {}
    if "title" in options:
        fields["title"] = options["title"]
    if "body" in options:
        fields["body"] = options["body"]
    if "tags" in options:
        fields["tags"] = split_tags(options["tags"])
    if "color" in options:
        color = options["color"]
        fields["color_hex"] = None if color.lower() == "none" else color

    if not fields:
        print("Nothing to change.", file=sys.stderr)
        return 1

    repo, _ = open_repository()
    note = repo.update(repo.resolve(positionals[0]), **fields)
    print(format_note_detail(note))
    return 0


def cmd_pin(args: list[str]) -> int:
    """Toggle pinned."""
    if not args:
        print("Usage: smartnotes pin <id>", file=sys.stderr)
        return 1

    repo, _ = open_repository()
    note = repo.toggle_pin(repo.resolve(args[0]))
    state = "Pinned" if note.pinned else "Unpinned"
    print(f"{state}: {note.display_title}")
    return 0


def cmd_delete(args: list[str]) -> int:
    """Delete a note."""
    if not args:
        print("Usage: smartnotes delete <id>", file=sys.stderr)
        return 1

    repo, _ = open_repository()
    note = repo.get(repo.resolve(args[0]))
    repo.delete(note.id)
    print(f"Deleted: {note.display_title}")
    return 0


def cmd_tags() -> int:
    """List tags in use."""
    from smartnotes.display import format_tag_chips
    from smartnotes.query import tag_index

    repo, _ = open_repository()
    print(format_tag_chips(tag_index(repo.list())))
    return 0


def cmd_export() -> int:
    """Print all notes as JSON."""
    from smartnotes.db import export_json
    from smartnotes.query import filter_sort

    repo, _ = open_repository()
    print(export_json(filter_sort(repo.list())))
    return 0


def cmd_import(args: list[str]) -> int:
    """Add notes from an export file."""
    from pathlib import Path

    from smartnotes.db import import_json

    if not args:
        print("Usage: smartnotes import <file>", file=sys.stderr)
        return 1

    notes = import_json(Path(args[0]).read_text(encoding="utf-8"))
    repo, _ = open_repository()
    added = repo.import_notes(notes)
    print(f"Imported {len(added)} notes.")
    return 0


def cmd_seed() -> int:
    """Add the sample notes."""
    from smartnotes.models import sample_notes

    repo, _ = open_repository()
    added = repo.import_notes(sample_notes())
    print(f"Added {len(added)} sample notes.")
    return 0


def cmd_stats() -> int:
    """Show database statistics."""
    repo, _ = open_repository()
    stats = repo.store.get_stats()

    print("SmartNotes Statistics")
    print("-" * 30)
    print(f"Total notes: {stats['total_notes']}")
    print(f"Pinned: {stats['pinned']}")
    if stats["by_tag"]:
        print("\nBy tag:")
        for tag, count in stats["by_tag"].items():
            print(f"  {tag}: {count}")
    return 0


COMMANDS = {
    "new": cmd_new,
    "list": cmd_list,
    "show": cmd_show,
    "edit": cmd_edit,
    "pin": cmd_pin,
    "delete": cmd_delete,
    "import": cmd_import,
}

NO_ARG_COMMANDS = {
    "tags": cmd_tags,
    "export": cmd_export,
    "seed": cmd_seed,
    "stats": cmd_stats,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from smartnotes.exceptions import SmartNotesError

    args = sys.argv[1:] if argv is None else argv

    if not args or args[0] in ("--help", "-h", "help"):
        print_help()
        return 0

    first_arg = args[0]

    if first_arg in ("--version", "-v", "version"):
        print_version()
        return 0

    try:
        if first_arg in COMMANDS:
            return COMMANDS[first_arg](args[1:])
        if first_arg in NO_ARG_COMMANDS:
            return NO_ARG_COMMANDS[first_arg]()
    except (SmartNotesError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Unknown command: {first_arg}", file=sys.stderr)
    print("Run 'smartnotes --help' for usage.", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
