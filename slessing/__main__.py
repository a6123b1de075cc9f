"""slessing CLI entry point.

Allows running via `python -m slessing` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .constants import EditorConstants
from .version import get_version_string

USAGE = "usage: slessing [--version] [--keytest] [--debug] [--plugins DIR] [FILE]"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def configure_logging(debug: bool) -> None:
    """Send log records to a file under --debug; the screen belongs to the editor."""
    if not debug:
        logging.getLogger("slessing").addHandler(logging.NullHandler())
        return
    import platformdirs
    log_dir = Path(platformdirs.user_log_dir(EditorConstants.APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_dir / EditorConstants.LOG_FILENAME),
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_keyboard_test() -> None:
    """Print parsed key events until ESC is pressed."""
    from .terminal import TerminalInterface
    from .keyboard import KeyEvent, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    try:
        while True:
            ev: KeyEvent | None = term.poll_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                print("Exiting keyboard test.")
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value}", f"raw='{_escape_bytes(ev.raw)}'"]
            flags = [name for name, on in (('alt', ev.is_alt), ('ctrl', ev.is_ctrl), ('shift', ev.is_shift)) if on]
            if flags:
                parts.append(f"flags={'+'.join(flags)}")
            print(' '.join(parts))
    finally:
        term.cleanup()


def parse_args(args: list[str]) -> dict:
    """Very small arg parsing: flags, an optional --plugins DIR, an optional filename."""
    options = {"version": False, "keytest": False, "debug": False, "plugins": None, "filename": None}
    it = iter(args)
    for arg in it:
        if arg in ("--version", "-V"):
            options["version"] = True
        elif arg in ("--keytest", "--keyboard-test"):
            options["keytest"] = True
        elif arg == "--debug":
            options["debug"] = True
        elif arg == "--plugins":
            options["plugins"] = next(it, None)
            if options["plugins"] is None:
                raise ValueError("--plugins needs a directory")
        elif arg.startswith("-") and arg != "-":
            raise ValueError(f"unknown option: {arg}")
        elif options["filename"] is None:
            options["filename"] = arg
        else:
            raise ValueError("only one file can be edited at a time")
    return options


def main() -> None:
    try:
        options = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"slessing: {e}\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    if options["version"]:
        print(get_version_string())
        return
    if options["keytest"]:
        run_keyboard_test()
        return

    configure_logging(options["debug"])

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .errors import DocumentIOError

    editor = Editor()
    editor.load_plugins(options["plugins"])
    if options["filename"]:
        try:
            editor.load_file(options["filename"])
        except DocumentIOError as e:
            editor.plugin_host.shutdown()
            print(f"slessing: {e}", file=sys.stderr)
            sys.exit(1)
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
