"""Terminal interface using Blessed for display and Curtsies for input."""

import errno
import logging
import os
import sys
import termios
from collections import deque
from typing import Optional

import blessed
from curtsies import Input
from curtsies.events import PasteEvent

from .constants import EditorConstants
from .errors import EditorFatalError

logger = logging.getLogger(__name__)

# Errors that only mean "no key yet"
_RETRY_ERRNOS = (errno.EAGAIN, errno.EWOULDBLOCK, errno.EINTR)


class RawMode:
    """Scoped raw terminal mode.

    ``enable()`` captures the current attributes of ``fd`` and installs raw
    mode; ``restore()`` puts the captured attributes back and does nothing
    on a second call. Used as a context manager the restore runs on every
    way out of the block, exceptions and SystemExit included.
    """

    def __init__(self, fd: Optional[int] = None,
                 read_timeout: float = EditorConstants.DEFAULT_READ_TIMEOUT):
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.read_timeout = read_timeout
        self._saved: Optional[list] = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def enable(self) -> None:
        try:
            saved = termios.tcgetattr(self.fd)
        except termios.error as e:
            raise EditorFatalError(f"tcgetattr: {e}") from e

        raw = list(saved)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK
                    | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        cc = list(raw[6])
        cc[termios.VMIN] = 0
        # VTIME counts tenths of a second
        cc[termios.VTIME] = max(0, min(255, int(round(self.read_timeout * 10))))
        raw[6] = cc

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise EditorFatalError(f"tcsetattr: {e}") from e
        self._saved = saved
        logger.debug("raw mode enabled on fd %d", self.fd)

    def restore(self) -> None:
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, saved)
        except termios.error as e:
            raise EditorFatalError(f"tcsetattr: {e}") from e
        logger.debug("terminal attributes restored on fd %d", self.fd)

    def __enter__(self):
        self.enable()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False


class TerminalInterface:
    """Handles terminal I/O: geometry and screen through Blessed, keys through Curtsies."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 output_fd: Optional[int] = None):
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._output_fd = output_fd
        self._input: Optional[Input] = None
        self._pending: deque = deque()

    def setup(self):
        """Enter the alternate screen and start reading keys."""
        self.write(str(self.term.enter_fullscreen).encode('utf-8'))
        self.is_fullscreen = True
        if self._input is None:
            try:
                self._input = Input(keynames='curtsies')
                self._input.__enter__()
            except (termios.error, OSError) as e:
                self._input = None
                raise EditorFatalError(f"cannot read keyboard: {e}") from e

    def cleanup(self):
        """Stop reading keys and leave the alternate screen."""
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)
            finally:
                self._input = None
        self._pending.clear()
        if self.is_fullscreen:
            self.write(EditorConstants.CURSOR_SHAPE_DEFAULT)
            self.write(str(self.term.exit_fullscreen).encode('utf-8'))
            self.is_fullscreen = False

    def clear_screen(self):
        """Clear the entire screen and home the cursor."""
        self.write(EditorConstants.CLEAR_SCREEN + EditorConstants.CURSOR_HOME)

    def write(self, data: bytes) -> None:
        """Write ``data`` to the terminal in one call, finishing short writes."""
        fd = sys.stdout.fileno() if self._output_fd is None else self._output_fd
        view = memoryview(data)
        while view:
            try:
                written = os.write(fd, view)
            except InterruptedError:
                continue
            except OSError as e:
                raise EditorFatalError(f"write: {e}") from e
            view = view[written:]

    def get_key(self, timeout: Optional[float] = None) -> Optional[str]:
        """Get a single key token, or None if ``timeout`` seconds pass first.

        curtsies may read several keys at once and keeps the surplus in its
        own buffer, so waiting goes through ``Input.send`` rather than a
        select on the stream.
        """
        if self._pending:
            return self._pending.popleft()
        if self._input is None:
            return None
        try:
            event = self._input.send(timeout)
        except OSError as e:
            if e.errno in _RETRY_ERRNOS:
                return None
            raise EditorFatalError(f"read: {e}") from e
        if event is None:
            return None
        if isinstance(event, PasteEvent):
            # A paste arrives as one event carrying every key
            self._pending.extend(str(key) for key in event.events)
            return self._pending.popleft() if self._pending else None
        return str(event)

    @property
    def width(self) -> int:
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self) -> int:
        """Terminal height in rows, status line included."""
        return self.term.height
