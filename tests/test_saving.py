import os
import stat
import tempfile

from modaltype.document import LineStore
from modaltype.editor import Editor
from modaltype.keyboard import KeyEvent, KeyType


def key(ch):
    return KeyEvent(key_type=KeyType.REGULAR, value=ch, raw=ch)


ENTER = KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw='\r')


def test_save_file_creates_file():
    """Test that save_file writes every line followed by a newline."""
    editor = Editor()
    editor.state.lines = LineStore([b"First line", b"Second line", b"Third line"])

    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
        temp_filename = f.name

    try:
        result = editor.save_file(temp_filename)
        assert result == True

        with open(temp_filename, 'rb') as f:
            content = f.read()

        assert content == b"First line\nSecond line\nThird line\n"
        assert editor.state.status_message == f'"{temp_filename}" 3L, 34B written'

    finally:
        if os.path.exists(temp_filename):
            os.remove(temp_filename)


def test_save_file_overwrites_existing():
    editor = Editor()

    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
        f.write("Old content that is longer than the new content")
        temp_filename = f.name

    try:
        editor.state.lines = LineStore([b"New", b"Line 2"])
        assert editor.save_file(temp_filename)

        with open(temp_filename, 'rb') as f:
            assert f.read() == b"New\nLine 2\n"

    finally:
        if os.path.exists(temp_filename):
            os.remove(temp_filename)


def test_save_keeps_file_permissions():
    editor = Editor()
    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
        temp_filename = f.name
    os.chmod(temp_filename, 0o644)

    try:
        editor.state.lines = LineStore([b"x"])
        assert editor.save_file(temp_filename)
        assert stat.S_IMODE(os.stat(temp_filename).st_mode) == 0o644
    finally:
        os.remove(temp_filename)


def test_save_empty_document_writes_empty_file():
    editor = Editor()
    with tempfile.NamedTemporaryFile(mode='w', suffix='.txt', delete=False) as f:
        f.write("something")
        temp_filename = f.name
    try:
        assert editor.save_file(temp_filename)
        with open(temp_filename, 'rb') as f:
            assert f.read() == b""
    finally:
        os.remove(temp_filename)


def test_save_failure_is_reported_and_editor_keeps_running():
    editor = Editor()
    editor.state.lines = LineStore([b"data"])
    target = "/nonexistent/dir/file.txt"

    assert editor.save_file(target) == False
    assert editor.state.status_message == f"Error: Cannot save to {target}"
    assert editor.state.running


def test_load_file_strips_line_endings():
    with tempfile.NamedTemporaryFile(mode='wb', suffix='.txt', delete=False) as f:
        f.write(b"Line 1\r\nLine 2\n\nLine 4")
        temp_filename = f.name

    try:
        editor = Editor()
        editor.load_file(temp_filename)

        assert editor.filename == temp_filename
        assert editor.state.lines.to_bytes_list() == [b"Line 1", b"Line 2", b"", b"Line 4"]
        # Cursor starts after the last character of the last line
        assert editor.state.cursor.row == 3
        assert editor.state.cursor.column == 6
        assert editor.state.cursor.preferred_column == 6
        assert editor.state.status_message is None
    finally:
        os.remove(temp_filename)


def test_load_nonexistent_file():
    """Loading a missing file starts an empty document and keeps the path."""
    editor = Editor()

    editor.load_file("/nonexistent/file.txt")

    assert editor.filename == "/nonexistent/file.txt"
    assert len(editor.state.lines) == 0
    assert editor.state.cursor.row == 0
    assert editor.state.cursor.column == 0
    assert editor.state.status_message.startswith("Cannot open /nonexistent/file.txt")


def test_load_empty_file_has_no_lines():
    with tempfile.NamedTemporaryFile(mode='wb', suffix='.txt', delete=False) as f:
        temp_filename = f.name
    try:
        editor = Editor()
        editor.load_file(temp_filename)
        assert len(editor.state.lines) == 0
    finally:
        os.remove(temp_filename)


def test_colon_w_writes_document_to_open_path():
    """Document ["hello"] opened from P; typing :w Enter writes b"hello\\n" to P."""
    with tempfile.NamedTemporaryFile(mode='wb', suffix='.txt', delete=False) as f:
        f.write(b"hello")
        temp_filename = f.name

    try:
        editor = Editor()
        editor.load_file(temp_filename)
        for k in (key(':'), key('w'), ENTER):
            editor.dispatcher.dispatch(editor.state, k)

        with open(temp_filename, 'rb') as f:
            assert f.read() == b"hello\n"
        assert editor.state.running
    finally:
        os.remove(temp_filename)


def test_edit_then_save_round_trip():
    with tempfile.NamedTemporaryFile(mode='wb', suffix='.txt', delete=False) as f:
        f.write(b"ab\n")
        temp_filename = f.name

    try:
        editor = Editor()
        editor.load_file(temp_filename)
        events = [key('i'), key('c'), ENTER, key('d'),
                  KeyEvent(KeyType.SPECIAL, 'escape', '\x1b'),
                  key(':'), key('w'), ENTER]
        for k in events:
            editor.dispatcher.dispatch(editor.state, k)

        with open(temp_filename, 'rb') as f:
            assert f.read() == b"abc\nd\n"
    finally:
        os.remove(temp_filename)
