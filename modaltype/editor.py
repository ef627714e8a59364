"""Main editor controller."""

import errno
import logging
import os
import signal
import stat
import sys
import tempfile
from typing import Optional

from .buffer import BufferGrowthError
from .commands import CommandProcessor
from .constants import EditorConstants
from .document import LineStore
from .errors import EditorFatalError
from .keyboard import KeyboardHandler, KeyEvent
from .modes import EditorState, ModeDispatcher
from .render import FrameRenderer
from .settings import Settings
from .terminal import RawMode, TerminalInterface

logger = logging.getLogger(__name__)

# Signals that end the process; each one still restores the terminal
TERMINATING_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


class Editor:
    """Modal editor application controller.

    Owns the editor state and runs the loop: render, read one key,
    dispatch it to the handler of the current mode, repeat.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 terminal: Optional[TerminalInterface] = None):
        """Initialize the editor components."""
        self.settings = settings or Settings()
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.state = EditorState()
        self.command_processor = CommandProcessor(self.save_file)
        self.dispatcher = ModeDispatcher(self.command_processor)
        self.renderer = FrameRenderer(self.settings.line_number_width)

    @property
    def filename(self) -> Optional[str]:
        return self.state.file_path

    def _handle_terminate(self, signum, frame):
        """Turn a termination signal into a fatal error so cleanup runs."""
        del frame  # Unused
        raise EditorFatalError(f"terminated by {signal.Signals(signum).name}")

    def run(self) -> int:
        """Run the main editor loop.

        Returns:
            Process exit status: 0 after a quit, 1 after a fatal error.
        """
        original_handlers = {
            signum: signal.signal(signum, self._handle_terminate)
            for signum in TERMINATING_SIGNALS
        }
        try:
            with RawMode(read_timeout=self.settings.read_timeout):
                try:
                    self.terminal.setup()
                    self._loop()
                except EditorFatalError:
                    self.state.clear_on_exit = True
                    raise
                finally:
                    if self.state.clear_on_exit:
                        self.terminal.clear_screen()
                    self.terminal.cleanup()
        except EditorFatalError as e:
            # The terminal is back in its original mode at this point
            logger.error("fatal error: %s", e)
            print(f"{EditorConstants.APP_NAME}: {e}", file=sys.stderr)
            return 1
        finally:
            for signum, handler in original_handlers.items():
                signal.signal(signum, handler)
        return 0

    def _loop(self):
        while self.state.running:
            try:
                self.renderer.render(self.state, self.terminal)
                key_event = self._read_key()
                self.dispatcher.dispatch(self.state, key_event)
            except BufferGrowthError as e:
                raise EditorFatalError(str(e)) from e

    def _read_key(self) -> KeyEvent:
        """Block until a key arrives, redrawing if the terminal is resized meanwhile."""
        size = (self.terminal.height, self.terminal.width)
        while True:
            key_event = self.keyboard.get_key_event(timeout=self.settings.read_timeout)
            if key_event is not None:
                return key_event
            new_size = (self.terminal.height, self.terminal.width)
            if new_size != size:
                size = new_size
                self.renderer.render(self.state, self.terminal)

    def load_file(self, filename: str):
        """Load a file into the editor.

        Each line loses its trailing newline and carriage return. A file
        that cannot be opened leaves an empty document and a status
        message; the editor still starts.

        Args:
            filename: Path to file to load
        """
        self.state.file_path = filename
        lines = LineStore()
        try:
            with open(filename, 'rb') as f:
                for raw in f:
                    lines.append_line(raw.rstrip(b'\r\n'))
        except OSError as e:
            logger.warning("cannot open %s: %s", filename, e)
            self.state.status_message = EditorConstants.OPEN_ERROR_MESSAGE.format(
                filename, e.strerror or e)
            lines = LineStore()
        self.state.lines = lines
        self.state.place_cursor_at_end()
        logger.info("loaded %s (%d lines)", filename, len(lines))

    def save_file(self, filename: str) -> bool:
        """Save the current document to a file atomically.

        Every line is written followed by a single newline.

        Args:
            filename: Path to save file to

        Returns:
            True if save succeeded, False otherwise
        """
        content = b''.join(line + b'\n' for line in self.state.lines.to_bytes_list())
        dir_name = os.path.dirname(filename) or '.'
        base_name = os.path.basename(filename)
        temp_filename = None
        try:
            # Temp file in the same directory so the rename stays on one filesystem
            with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name,
                                             prefix=EditorConstants.ATOMIC_SAVE_PREFIX + base_name,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            if os.path.exists(filename):
                # Keep the permissions of the file being replaced
                os.chmod(temp_filename, stat.S_IMODE(os.stat(filename).st_mode))
            os.replace(temp_filename, filename)
        except OSError as e:
            logger.warning("cannot save %s: %s", filename, e)
            if isinstance(e, PermissionError):
                self.state.status_message = EditorConstants.SAVE_PERMISSION_MESSAGE.format(filename)
            elif e.errno == errno.ENOSPC:
                self.state.status_message = EditorConstants.SAVE_NO_SPACE_MESSAGE
            else:
                self.state.status_message = EditorConstants.SAVE_ERROR_MESSAGE.format(filename)
            self._remove_temp(temp_filename)
            return False

        self.state.status_message = EditorConstants.SAVED_MESSAGE.format(
            filename, len(self.state.lines), len(content))
        logger.info("saved %s (%d bytes)", filename, len(content))
        return True

    @staticmethod
    def _remove_temp(temp_filename: Optional[str]):
        if temp_filename and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError as e:
                logger.warning("cannot remove temporary file %s: %s", temp_filename, e)
