"""Test the command registry and the built-in commands."""

from unittest.mock import Mock

import pytest

from slessing.commands import BUILTIN_COMMANDS, Command, CommandRegistry, register_builtin_commands
from slessing.errors import CommandNotFound
from slessing.modes import Mode

from conftest import type_command, press


def test_execute_by_alias():
    quit_handler, write_handler = Mock(), Mock()
    registry = CommandRegistry()
    registry.register(Command("quit", quit_handler, aliases=("q",)))
    registry.register(Command("write", write_handler, aliases=("w",)))

    editor = Mock()
    registry.execute(editor, "q")

    quit_handler.assert_called_once_with(editor, [])
    write_handler.assert_not_called()


def test_unknown_command_raises():
    registry = CommandRegistry()
    registry.register(Command("quit", Mock(), aliases=("q",)))
    with pytest.raises(CommandNotFound) as excinfo:
        registry.execute(Mock(), "x")
    assert str(excinfo.value) == "unknown command: x"
    assert isinstance(excinfo.value, KeyError)


def test_args_passed_as_list():
    handler = Mock()
    registry = CommandRegistry()
    registry.register(Command("open", handler))
    editor = Mock()
    registry.execute(editor, "open", ("a.txt",))
    handler.assert_called_once_with(editor, ["a.txt"])


def test_handler_errors_propagate():
    registry = CommandRegistry()
    registry.register(Command("boom", Mock(side_effect=RuntimeError("bad"))))
    with pytest.raises(RuntimeError):
        registry.execute(Mock(), "boom")


def test_register_twice_lists_once():
    registry = CommandRegistry()
    command = Command("quit", Mock(), aliases=("q",))
    registry.register(command)
    registry.register(command)
    assert registry.list_names() == ["quit"]


def test_aliases_collapse_in_list_names():
    registry = CommandRegistry()
    register_builtin_commands(registry)
    assert registry.list_names() == ["quit", "write", "save", "open", "help", "settings"]
    assert len(registry.commands()) == len(BUILTIN_COMMANDS)


def test_last_registration_wins():
    first, second = Mock(), Mock()
    registry = CommandRegistry()
    registry.register(Command("save", first, aliases=("s",)))
    registry.register(Command("sort", second, aliases=("s",)))

    editor = Mock()
    registry.execute(editor, "s")
    second.assert_called_once()
    first.assert_not_called()
    # The primary name of the first command still resolves to it
    assert registry.lookup("save").handler is first


def test_get_and_contains():
    registry = CommandRegistry()
    register_builtin_commands(registry)
    assert "?" in registry
    assert registry.get("?").name == "help"
    assert registry.get("nope") is None


# --- built-ins through an editor session ---

def test_write_enters_insert_mode(editor):
    type_command(editor, "w")
    assert editor.modes.mode == Mode.INSERT


def test_settings_enters_settings_mode(editor):
    type_command(editor, "set")
    assert editor.modes.mode == Mode.SETTINGS


def test_quit_without_changes(editor):
    editor.running = True
    type_command(editor, "q")
    assert editor.running is False


def test_quit_with_changes_asks_first(editor):
    editor.running = True
    editor.modified = True
    type_command(editor, "quit")
    assert editor.running is True
    assert editor.modes.active_prompt.label == "Save file? (y, n)"

    press(editor, "n")
    assert editor.running is False


def test_quit_confirm_yes_saves(editor, tmp_path):
    target = tmp_path / "notes.txt"
    editor.filename = str(target)
    editor.document.replace_all(["keep me"])
    editor.modified = True
    editor.running = True

    type_command(editor, "q")
    press(editor, "y")

    assert editor.running is False
    assert target.read_text(encoding="utf-8") == "keep me"


def test_quit_confirm_yes_without_name_prompts_for_one(editor, tmp_path):
    editor.modified = True
    editor.running = True
    type_command(editor, "q")
    press(editor, "y")
    assert editor.modes.active_prompt.label == "Save as:"

    target = tmp_path / "out.txt"
    press(editor, *str(target), "<Ctrl-j>")
    assert target.exists()
    assert editor.running is False


def test_quit_confirm_other_key_cancels(editor):
    editor.modified = True
    editor.running = True
    type_command(editor, "q")
    press(editor, "x")
    assert editor.running is True
    assert editor.status_message == "Quit cancelled"


def test_save_with_argument(editor, tmp_path):
    target = tmp_path / "a.txt"
    editor.document.replace_all(["hello"])
    type_command(editor, f"save {target}")
    assert target.read_text(encoding="utf-8") == "hello"
    assert editor.filename == str(target)
    assert editor.status_message == f"Saved to {target}"


def test_save_without_name_prompts(editor, tmp_path):
    type_command(editor, "s")
    assert editor.modes.active_prompt.label == "Save as:"

    press(editor, "<ESC>")
    assert editor.modes.active_prompt is None
    assert list(tmp_path.iterdir()) == [tmp_path / "config"]


def test_save_reuses_current_filename(editor, tmp_path):
    target = tmp_path / "b.txt"
    editor.filename = str(target)
    type_command(editor, "s")
    assert editor.modes.active_prompt is None
    assert target.exists()


def test_open_with_argument(editor, tmp_path):
    source = tmp_path / "in.txt"
    source.write_text("one\ntwo", encoding="utf-8")
    type_command(editor, f"o {source}")
    assert editor.document.lines == ["one", "two"]
    assert editor.status_message == f"Opened {source}"


def test_open_missing_file_shows_error(editor, tmp_path):
    editor.document.replace_all(["unchanged"])
    type_command(editor, f"open {tmp_path / 'missing.txt'}")
    assert editor.document.lines == ["unchanged"]
    assert editor.error_message.startswith("No such file")
    assert editor.modes.mode == Mode.COMMAND


def test_open_without_argument_prompts(editor, tmp_path):
    source = tmp_path / "p.txt"
    source.write_text("prompted", encoding="utf-8")
    type_command(editor, "open")
    assert editor.modes.active_prompt.label == "Open file:"
    press(editor, *str(source), "<Ctrl-j>")
    assert editor.document.lines == ["prompted"]


def test_help_shows_screen(editor):
    type_command(editor, "?")
    assert editor.help_visible is True
    press(editor, "a")
    assert editor.help_visible is False
    assert editor.modes.input_text == ""


def test_help_for_one_command(editor):
    type_command(editor, "help save")
    assert editor.status_message == "save (s): Save current file"


def test_help_for_unknown_command(editor):
    type_command(editor, "help nope")
    assert editor.error_message == "unknown command: nope"
