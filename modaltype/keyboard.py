"""Keyboard input handling using curtsies-style tokens."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'q', 'escape')
    raw: str  # The token as read from the terminal

    @property
    def data(self) -> bytes:
        """Bytes to store when the event is typed into a buffer."""
        return self.value.encode('utf-8')

    def is_special(self, *names: str) -> bool:
        return self.key_type == KeyType.SPECIAL and self.value in names

    def is_ctrl(self, letter: str) -> bool:
        return self.key_type == KeyType.CTRL and self.value == letter


ESCAPE = 'escape'
ENTER = 'enter'
BACKSPACE = 'backspace'
DELETE = 'delete'

SPECIAL_NAMES = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert',
}


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents.

    An escape immediately followed by another key arrives from curtsies as
    a single ``<Esc+x>`` token. A modal editor needs both keys, so the
    handler splits such tokens and queues the second half.
    """

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface
        self._pending: deque[KeyEvent] = deque()

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Return the next key event, or None if the timeout elapsed."""
        if self._pending:
            return self._pending.popleft()
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        events = self.parse_key(key)
        self._pending.extend(events[1:])
        return events[0]

    def parse_key(self, key) -> list[KeyEvent]:
        """Parse a curtsies token or a raw character into key events."""
        key_str = str(key)

        # curtsies-style names like '<ESC>', '<Ctrl-q>', '<Esc+j>'
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            parts = key_str[1:-1].replace('+', '-').split('-')
            mods = {part.lower() for part in parts[:-1]}
            base = parts[-1] or '-'
            # Single characters keep their case: <Esc+J> is Escape then 'J'
            if len(base) > 1:
                base = base.lower()

            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            if mods & {'esc', 'meta', 'alt'}:
                # Escape pressed just before another key
                rest = self._parse_name(base, mods - {'esc', 'meta', 'alt'}, key_str)
                return [KeyEvent(KeyType.SPECIAL, ESCAPE, '\x1b'), rest]
            return [self._parse_name(base, mods, key_str)]

        # Escape followed by a plain character in one read
        if len(key_str) == 2 and key_str[0] == '\x1b':
            return [KeyEvent(KeyType.SPECIAL, ESCAPE, '\x1b'), self._parse_char(key_str[1])]

        if len(key_str) == 1:
            return [self._parse_char(key_str)]

        return [KeyEvent(KeyType.REGULAR, key_str, key_str)]

    def _parse_name(self, base: str, mods: set, raw: str) -> KeyEvent:
        if base in ('space', 'spacebar', 'spc') and not mods:
            return KeyEvent(KeyType.REGULAR, ' ', raw)
        if base == 'tab' and not mods:
            return KeyEvent(KeyType.REGULAR, '\t', raw)
        if 'ctrl' in mods and len(base) == 1:
            base = base.lower()
            # Ctrl-J / Ctrl-M are what terminals send for Enter
            if base in ('j', 'm'):
                return KeyEvent(KeyType.SPECIAL, ENTER, raw)
            if base == 'h':
                return KeyEvent(KeyType.SPECIAL, BACKSPACE, raw)
            return KeyEvent(KeyType.CTRL, base, raw)
        if base in ('esc', 'escape'):
            return KeyEvent(KeyType.SPECIAL, ESCAPE, '\x1b')
        if base in SPECIAL_NAMES:
            return KeyEvent(KeyType.SPECIAL, base, raw)
        if len(base) == 1 and not mods:
            return KeyEvent(KeyType.REGULAR, base, raw)
        return KeyEvent(KeyType.SPECIAL, base, raw)

    def _parse_char(self, ch: str) -> KeyEvent:
        o = ord(ch)
        if ch in ('\r', '\n'):
            return KeyEvent(KeyType.SPECIAL, ENTER, ch)
        if ch in ('\x7f', '\x08'):
            return KeyEvent(KeyType.SPECIAL, BACKSPACE, ch)
        if ch == '\x1b':
            return KeyEvent(KeyType.SPECIAL, ESCAPE, ch)
        if ch == '\t':
            return KeyEvent(KeyType.REGULAR, ch, ch)
        if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
            return KeyEvent(KeyType.CTRL, chr(ord('a') + o - 1), ch)
        if o < 32:
            return KeyEvent(KeyType.SPECIAL, f'control-{o}', ch)
        return KeyEvent(KeyType.REGULAR, ch, ch)
