"""Tests for the command line interface."""
import json

import pytest

from smartnotes import __version__
from smartnotes.cli import main, parse_options, split_tags


def run(capsys, *args):
    code = main(list(args))
    out, err = capsys.readouterr()
    return code, out, err


def created_ids(capsys):
    code, out, _ = run(capsys, "export")
    assert code == 0
    return list(json.loads(out))


class TestParsing:
    """Tests for argument helpers."""

    def test_parse_options(self):
        positionals, options = parse_options(
            ["Title", "--tag", "a", "Body", "--tag", "b", "--color", "#fff"],
            repeatable=("tag",),
        )
        assert positionals == ["Title", "Body"]
        assert options == {"tag": ["a", "b"], "color": "#fff"}

    def test_missing_value(self):
        with pytest.raises(ValueError):
            parse_options(["--title"])

    def test_split_tags(self):
        assert split_tags("work, home,,x ") == ["work", "home", "x"]


class TestCommands:
    """Smoke tests for each subcommand."""

    def test_help_and_version(self, capsys):
        code, out, _ = run(capsys, "--help")
        assert code == 0
        assert "smartnotes new" in out
        code, out, _ = run(capsys, "--version")
        assert out.strip() == f"smartnotes {__version__}"

    def test_unknown_command(self, capsys):
        code, _, err = run(capsys, "frobnicate")
        assert code == 1
        assert "Unknown command" in err

    def test_new_and_list(self, capsys):
        code, out, _ = run(capsys, "new", "Grocery List", "Milk, Bread, Eggs", "--tag", "errands")
        assert code == 0
        assert "Grocery List" in out
        run(capsys, "new", "App Idea", "streaks")

        code, out, _ = run(capsys, "list", "--search", "MILK")
        assert code == 0
        assert "Grocery List" in out
        assert "App Idea" not in out
        assert "#errands" in out

    def test_list_empty(self, capsys):
        code, out, _ = run(capsys, "list")
        assert code == 0
        assert "No notes found." in out

    def test_pin_orders_first(self, capsys):
        run(capsys, "new", "First")
        run(capsys, "new", "Second")
        exported = json.loads(run(capsys, "export")[1])
        first_id = next(k for k, v in exported.items() if v["title"] == "First")

        code, out, _ = run(capsys, "pin", first_id[:8])
        assert code == 0
        assert out.startswith("Pinned: First")

        _, out, _ = run(capsys, "list")
        assert out.index("First") < out.index("Second")

    def test_edit(self, capsys):
        run(capsys, "new", "Draft", "--color", "#abc")
        note_id = created_ids(capsys)[0]
        code, out, _ = run(capsys, "edit", note_id, "--title", "Final", "--tags", "a,b", "--color", "none")
        assert code == 0
        note = json.loads(run(capsys, "export")[1])[note_id]
        assert note["title"] == "Final"
        assert note["tags"] == ["a", "b"]
        assert note["color_hex"] is None

    def test_edit_without_changes(self, capsys):
        run(capsys, "new", "Draft")
        note_id = created_ids(capsys)[0]
        code, _, err = run(capsys, "edit", note_id)
        assert code == 1
        assert "Nothing to change" in err

    def test_delete_then_missing(self, capsys):
        run(capsys, "new", "Temp")
        note_id = created_ids(capsys)[0]
        code, out, _ = run(capsys, "delete", note_id)
        assert code == 0
        assert "Deleted: Temp" in out

        code, _, err = run(capsys, "show", note_id)
        assert code == 1
        assert "Note not found" in err

    def test_tags_seed_and_stats(self, capsys):
        code, out, _ = run(capsys, "seed")
        assert code == 0
        assert "Added 3 sample notes." in out

        _, out, _ = run(capsys, "tags")
        assert "[dev] [errands] [ideas] [work]" in out

        _, out, _ = run(capsys, "stats")
        assert "Total notes: 3" in out

    def test_import(self, capsys, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"abc123": {"title": "Imported"}}), encoding="utf-8")
        code, out, _ = run(capsys, "import", str(path))
        assert code == 0
        assert "Imported 1 notes." in out
        assert created_ids(capsys) == ["abc123"]

    def test_usage_errors(self, capsys):
        for command in ("show", "pin", "delete", "import"):
            code, _, err = run(capsys, command)
            assert code == 1
            assert "Usage" in err
