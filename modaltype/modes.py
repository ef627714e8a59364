"""Modal key handling: one handler per editor mode."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, TYPE_CHECKING

from .buffer import ByteBuffer
from .document import Cursor, LineStore
from .keyboard import BACKSPACE, DELETE, ENTER, ESCAPE, KeyEvent, KeyType

if TYPE_CHECKING:
    from .commands import CommandProcessor

logger = logging.getLogger(__name__)


class Mode(Enum):
    NORMAL = "NORMAL"
    INSERT = "INSERT"
    COMMAND = "COMMAND"


@dataclass
class EditorState:
    """Everything the key handlers and the renderer operate on."""
    lines: LineStore = field(default_factory=LineStore)
    cursor: Cursor = field(default_factory=Cursor)
    mode: Mode = Mode.NORMAL
    command_buffer: ByteBuffer = field(default_factory=ByteBuffer)
    file_path: Optional[str] = None
    status_message: Optional[str] = None
    running: bool = True
    clear_on_exit: bool = False

    def current_line_length(self) -> int:
        if not self.lines:
            return 0
        return self.lines.line_length(self.cursor.row)

    def place_cursor_at_end(self) -> None:
        """Put the cursor after the last character of the last line."""
        if not self.lines:
            self.cursor.move_to(0, 0)
            return
        row = len(self.lines) - 1
        self.cursor.move_to(row, self.lines.line_length(row))

    def set_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            logger.debug("mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    def quit(self, clear_screen: bool = False) -> None:
        self.running = False
        self.clear_on_exit = clear_screen


def _is_text(key_event: KeyEvent) -> bool:
    if key_event.key_type != KeyType.REGULAR or not key_event.value:
        return False
    return ord(key_event.value[0]) >= 32 or key_event.value == '\t'


class ModeHandler(ABC):
    """Base class for per-mode key handlers."""

    mode: Mode

    @abstractmethod
    def handle(self, state: EditorState, key_event: KeyEvent) -> None:
        """Apply one key event to the editor state."""


class NormalModeHandler(ModeHandler):
    """Navigation and mode entry."""

    mode = Mode.NORMAL

    def __init__(self):
        self._keys: Dict[str, Callable[[EditorState], None]] = {
            'i': self._insert,
            'a': self._append,
            ':': self._command,
            'j': self._down,
            'k': self._up,
            'h': self._left,
            'l': self._right,
        }

    def handle(self, state, key_event):
        if key_event.is_ctrl('q'):
            state.quit()
            return
        if key_event.key_type != KeyType.REGULAR:
            return
        action = self._keys.get(key_event.value)
        if action:
            action(state)

    def _insert(self, state):
        state.set_mode(Mode.INSERT)

    def _append(self, state):
        cursor = state.cursor
        cursor.column = min(cursor.column + 1, state.current_line_length())
        cursor.preferred_column = cursor.column
        state.set_mode(Mode.INSERT)

    def _command(self, state):
        state.command_buffer.reset()
        state.set_mode(Mode.COMMAND)

    def _down(self, state):
        if state.cursor.row < len(state.lines) - 1:
            self._vertical(state, state.cursor.row + 1)

    def _up(self, state):
        if state.cursor.row > 0:
            self._vertical(state, state.cursor.row - 1)

    @staticmethod
    def _vertical(state, row):
        # Preferred column is left alone so it sticks across short lines
        cursor = state.cursor
        cursor.row = row
        cursor.column = min(cursor.preferred_column, state.lines.line_length(row))

    def _left(self, state):
        cursor = state.cursor
        if cursor.column > 0:
            cursor.column -= 1
            cursor.preferred_column = cursor.column

    def _right(self, state):
        cursor = state.cursor
        if cursor.column < state.current_line_length():
            cursor.column += 1
            cursor.preferred_column = cursor.column


class InsertModeHandler(ModeHandler):
    """Text entry at the cursor."""

    mode = Mode.INSERT

    def handle(self, state, key_event):
        if key_event.is_special(ESCAPE):
            self._leave(state)
        elif key_event.is_special(ENTER):
            self._split_line(state)
        elif key_event.is_special(BACKSPACE, DELETE):
            self._backspace(state)
        elif _is_text(key_event):
            self._insert_text(state, key_event.data)

    def _leave(self, state):
        cursor = state.cursor
        if cursor.column > 0:
            cursor.column -= 1
        cursor.preferred_column = cursor.column
        state.set_mode(Mode.NORMAL)

    @staticmethod
    def _ensure_line(state):
        if not state.lines:
            state.lines.append_line(b'')
            state.cursor.move_to(0, 0)

    def _split_line(self, state):
        self._ensure_line(state)
        cursor = state.cursor
        tail = state.lines[cursor.row].truncate(cursor.column)
        state.lines.insert_line_at(cursor.row + 1, tail)
        cursor.move_to(cursor.row + 1, 0)

    def _backspace(self, state):
        cursor = state.cursor
        if not state.lines:
            return
        if cursor.column > 0:
            state.lines[cursor.row].delete(cursor.column - 1)
            cursor.move_to(cursor.row, cursor.column - 1)
        elif cursor.row > 0:
            removed = state.lines.delete_line_at(cursor.row)
            previous = state.lines[cursor.row - 1]
            join_column = len(previous)
            previous.append(bytes(removed))
            removed.release()
            cursor.move_to(cursor.row - 1, join_column)

    def _insert_text(self, state, data: bytes):
        self._ensure_line(state)
        cursor = state.cursor
        state.lines[cursor.row].insert(cursor.column, data)
        cursor.move_to(cursor.row, cursor.column + len(data))


class CommandModeHandler(ModeHandler):
    """Builds an ex-style command line and hands it to the processor."""

    mode = Mode.COMMAND

    def __init__(self, processor: 'CommandProcessor'):
        self.processor = processor

    def handle(self, state, key_event):
        if key_event.is_special(ENTER):
            command = bytes(state.command_buffer)
            state.command_buffer.reset()
            state.set_mode(Mode.NORMAL)
            self.processor.execute(state, command)
        elif key_event.is_special(ESCAPE):
            state.command_buffer.reset()
            state.set_mode(Mode.NORMAL)
        elif key_event.is_special(BACKSPACE, DELETE):
            state.command_buffer.remove_last()
        elif _is_text(key_event):
            state.command_buffer.append(key_event.data)


class ModeDispatcher:
    """Routes each key event to the handler of the current mode."""

    def __init__(self, processor: 'CommandProcessor'):
        self._handlers: Dict[Mode, ModeHandler] = {}
        self.register(NormalModeHandler())
        self.register(InsertModeHandler())
        self.register(CommandModeHandler(processor))

    def register(self, handler: ModeHandler) -> None:
        self._handlers[handler.mode] = handler

    def handler_for(self, mode: Mode) -> ModeHandler:
        return self._handlers[mode]

    def dispatch(self, state: EditorState, key_event: KeyEvent) -> None:
        # Any keypress clears a message left by the previous command
        state.status_message = None
        self.handler_for(state.mode).handle(state, key_event)
