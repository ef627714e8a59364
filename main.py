#!/usr/bin/env python3
"""modaltype - a small modal text editor.

Usage:
    python main.py FILE

Controls:
    NORMAL mode: h/j/k/l move, i/a insert, : command line, Ctrl-Q quit
    INSERT mode: type text, Enter splits the line, Backspace deletes, Esc leaves
    COMMAND mode: :w write, :q quit, :wq write and quit, Esc cancels
"""

from modaltype.__main__ import main


if __name__ == "__main__":
    main()
