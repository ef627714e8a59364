"""Screen rendering: editor state to a single terminal frame."""

from dataclasses import dataclass

from .buffer import ByteBuffer
from .constants import EditorConstants
from .modes import EditorState, Mode


@dataclass
class Viewport:
    """First document row shown at the top of the screen."""
    top: int = 0

    def scroll_to(self, row: int, text_rows: int) -> None:
        """Scroll the minimum amount that puts ``row`` on screen."""
        if text_rows <= 0:
            return
        if row < self.top:
            self.top = row
        elif row >= self.top + text_rows:
            self.top = row - text_rows + 1


class FrameRenderer:
    """Builds frames from editor state and writes them to a terminal.

    The whole screen is assembled in one ByteBuffer and written with a
    single call, followed by the cursor shape and cursor position
    sequences. The last terminal row is the status line; every row above
    it shows a document line or a filler marker.
    """

    def __init__(self, line_number_width: int = EditorConstants.DEFAULT_LINE_NUMBER_WIDTH):
        self.line_number_width = line_number_width
        self.viewport = Viewport()

    @property
    def gutter_width(self) -> int:
        return self.line_number_width + len(EditorConstants.GUTTER_SEPARATOR)

    def render(self, state: EditorState, terminal) -> None:
        height, width = terminal.height, terminal.width
        frame = self.build_frame(state, height, width)
        try:
            terminal.write(bytes(frame))
        finally:
            frame.release()
        terminal.write(self.cursor_shape(state))
        terminal.write(self.cursor_position(state, height, width))

    def build_frame(self, state: EditorState, height: int, width: int) -> ByteBuffer:
        text_rows = max(height - 1, 0)
        self.viewport.scroll_to(state.cursor.row, text_rows)

        frame = ByteBuffer()
        frame.append(EditorConstants.CLEAR_SCREEN)
        frame.append(EditorConstants.CURSOR_HOME)
        for screen_row in range(text_rows):
            index = self.viewport.top + screen_row
            if index < len(state.lines):
                frame.append(self._format_line(index, bytes(state.lines[index]), width))
            else:
                frame.append(EditorConstants.FILLER_LINE)
            frame.append(EditorConstants.LINE_END)
        if height > 0:
            frame.append(self.status_line(state)[:width])
        return frame

    def _format_line(self, index: int, content: bytes, width: int) -> bytes:
        number = str(index + 1).rjust(self.line_number_width).encode('ascii')
        room = max(width - self.gutter_width, 0)
        return number + EditorConstants.GUTTER_SEPARATOR + content[:room]

    def status_line(self, state: EditorState) -> bytes:
        if state.mode == Mode.COMMAND:
            return EditorConstants.COMMAND_PROMPT + bytes(state.command_buffer)
        if state.status_message:
            return state.status_message.encode('utf-8', 'replace')
        return state.mode.value.encode('ascii')

    @staticmethod
    def cursor_shape(state: EditorState) -> bytes:
        if state.mode == Mode.INSERT:
            return EditorConstants.CURSOR_SHAPE_BAR
        return EditorConstants.CURSOR_SHAPE_BLOCK

    def cursor_position(self, state: EditorState, height: int, width: int) -> bytes:
        if state.mode == Mode.COMMAND:
            row = max(height, 1)
            column = len(EditorConstants.COMMAND_PROMPT) + len(state.command_buffer) + 1
        else:
            row = state.cursor.row - self.viewport.top + 1
            column = state.cursor.column + self.gutter_width + 1
        if width > 0:
            column = min(column, width)
        return EditorConstants.CURSOR_POSITION.format(row=row, column=column).encode('ascii')
