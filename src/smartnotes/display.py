"""
Display module for SmartNotes.

Terminal rendering for the list, detail and tag-chip views.
"""

import os
from typing import Iterable

from smartnotes.models import Note


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    REVERSE = "\033[7m"

    # Foreground colors
    BLUE = "\033[34m"
    WHITE = "\033[37m"

    # Bright foreground colors
    BRIGHT_BLACK = "\033[90m"  # Gray
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_CYAN = "\033[96m"

    @classmethod
    def enabled(cls) -> bool:
        """Check if colors should be enabled."""
        if os.environ.get("NO_COLOR"):
            return False
        return True


def c(text: str, *codes: str) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled():
        return text
    return "".join(codes) + text + Colors.RESET


def swatch(color_hex: str | None) -> str:
    """A one-cell colour bar in 24-bit colour, gray when unset."""
    if not color_hex or not Colors.enabled():
        return "▌"
    digits = color_hex.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    return f"\033[38;2;{r};{g};{b}m▌{Colors.RESET}"


def format_note_row(note: Note) -> str:
    """One list row: swatch, title, pin marker, first tags, updated date."""
    title = note.display_title[:40]
    pin = c(" [pinned]", Colors.BRIGHT_YELLOW) if note.pinned else ""
    tags = " ".join(c(f"#{tag}", Colors.BRIGHT_CYAN) for tag in note.first_tags(3))
    date = c(note.updated_at.date().isoformat(), Colors.DIM)
    id_str = c(note.id[:8], Colors.DIM)

    line = f"{swatch(note.color_hex)} {id_str}  {c(title, Colors.BOLD)}{pin}"
    preview = note.preview.splitlines()[0][:60] if note.preview else ""
    lines = [line]
    if preview:
        lines.append(f"  {' ' * 8}  {c(preview, Colors.BRIGHT_BLACK)}")
    lines.append(f"  {' ' * 8}  {tags}{'  ' if tags else ''}{date}")
    return "\n".join(lines)


def format_note_list(
    notes: list[Note],
    tag: str | None = None,
    search: str = "",
    limit: int | None = None,
) -> str:
    """Format an already filtered and sorted list of notes."""
    if not notes:
        if search:
            return c(f"No notes matching '{search}'.", Colors.DIM)
        return c("No notes found.", Colors.DIM)

    header_text = "NOTES"
    if tag:
        header_text += f" #{tag}"
    if search:
        header_text += f" / SEARCH: {search}"

    lines = [c(f"━━━ {header_text} ━━━", Colors.BOLD, Colors.BLUE), ""]
    shown = notes[:limit] if limit else notes
    for note in shown:
        lines.append(format_note_row(note))
    if len(shown) < len(notes):
        lines.append("")
        lines.append(c(f"... {len(notes) - len(shown)} more", Colors.DIM))
    return "\n".join(lines)


def format_note_detail(note: Note) -> str:
    """Full view of a single note."""
    lines = [c(note.display_title, Colors.BOLD)]
    meta = [f"id: {note.id}"]
    if note.pinned:
        meta.append("pinned")
    if note.color_hex:
        meta.append(f"colour: {note.color_hex}")
    lines.append(c("  ".join(meta), Colors.DIM))
    lines.append(c(
        f"created: {note.created_at.isoformat(timespec='seconds')}  "
        f"updated: {note.updated_at.isoformat(timespec='seconds')}",
        Colors.DIM,
    ))
    if note.tags:
        lines.append(" ".join(f"#{tag}" for tag in note.tags))
    lines.append(c("─" * 40, Colors.DIM))
    lines.append(note.body)
    return "\n".join(lines)


def format_tag_chips(tags: Iterable[str], selected: str | None = None) -> str:
    """Chip bar with an "All" chip first; the selected chip is highlighted."""
    tags = list(tags)
    if not tags:
        return c("No tags in use.", Colors.DIM)

    def chip(label: str, active: bool) -> str:
        text = f" {label} "
        return c(text, Colors.REVERSE) if active else f"[{label}]"

    chips = [chip("All", selected is None)]
    chips.extend(chip(tag, tag == selected) for tag in tags)
    return " ".join(chips)
