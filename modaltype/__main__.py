"""modaltype CLI entry point.

Allows running via `python -m modaltype FILE` and provides the console
script defined in `pyproject.toml`.
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys

from .constants import EditorConstants
from .settings import load_settings, log_path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def _configure_logging() -> None:
    """Send log records to a file; the screen belongs to the editor."""
    path = log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding='utf-8')
    except OSError:
        # No writable log directory: run without a log file
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)


def get_version_string() -> str:
    try:
        return importlib.metadata.version(EditorConstants.APP_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def run_keyboard_test() -> int:
    """Run an interactive keyboard test using the editor's input stack.

    Puts the terminal in raw mode exactly as the editor does and prints
    each parsed event. Quit with ESC.
    """
    from .errors import EditorFatalError
    from .keyboard import KeyboardHandler
    from .terminal import RawMode, TerminalInterface

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    kb = KeyboardHandler(term)
    try:
        with RawMode():
            term.setup()
            try:
                while True:
                    ev = kb.get_key_event(timeout=None)
                    if not ev:
                        continue
                    if ev.is_special('escape'):
                        term.write(b"Exiting keyboard test.\r\n")
                        break
                    line = f"type={ev.key_type.value} value={_escape_bytes(ev.value)} raw='{_escape_bytes(ev.raw)}'"
                    term.write(line.encode('utf-8') + EditorConstants.LINE_END)
            finally:
                term.cleanup()
    except EditorFatalError as e:
        print(f"{EditorConstants.APP_NAME}: {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ('--keytest', '--keyboard-test'):
        sys.exit(run_keyboard_test())
    if len(args) != 1:
        print(EditorConstants.USAGE_MESSAGE)
        return

    _configure_logging()
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)

    # Lazy import to avoid importing terminal deps for --version
    from .editor import Editor
    editor = Editor(settings)
    editor.load_file(args[0])
    sys.exit(editor.run())


if __name__ == "__main__":  # pragma: no cover
    main()
