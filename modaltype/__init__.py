"""modaltype - a small modal text editor for the terminal."""

from .buffer import ByteBuffer, BufferGrowthError
from .document import Cursor, LineStore
from .errors import EditorFatalError
from .modes import EditorState, Mode, ModeDispatcher
from .render import FrameRenderer

__all__ = [
    'ByteBuffer',
    'BufferGrowthError',
    'Cursor',
    'LineStore',
    'EditorFatalError',
    'EditorState',
    'Mode',
    'ModeDispatcher',
    'FrameRenderer',
]
