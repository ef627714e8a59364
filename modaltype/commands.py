"""Ex-style command line processing."""

import logging
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .modes import EditorState

logger = logging.getLogger(__name__)


class CommandProcessor:
    """Runs a finished COMMAND-mode line.

    Only the first byte selects the command: ``w`` writes the file and
    ``q`` quits. ``wq`` writes and then quits if the write succeeded.
    Anything else is ignored.
    """

    def __init__(self, save_file: Callable[[str], bool]):
        self._save_file = save_file

    def execute(self, state: 'EditorState', command: bytes) -> None:
        if not command:
            return
        first = command[:1]
        if first == b'w':
            saved = self._write(state)
            if saved and command == b'wq':
                state.quit(clear_screen=True)
        elif first == b'q':
            logger.info("quit requested")
            state.quit(clear_screen=True)
        else:
            logger.debug("ignoring unknown command %r", command)

    def _write(self, state: 'EditorState') -> bool:
        if not state.file_path:
            state.status_message = "No file name"
            return False
        return self._save_file(state.file_path)
