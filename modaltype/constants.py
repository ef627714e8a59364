"""Constants and configuration for the modaltype editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Terminal protocol
    CLEAR_SCREEN = b"\x1b[2J"
    CURSOR_HOME = b"\x1b[H"
    CURSOR_POSITION = "\x1b[{row};{column}H"  # 1-based
    CURSOR_SHAPE_BAR = b"\x1b[6 q"  # steady bar, used in INSERT mode
    CURSOR_SHAPE_BLOCK = b"\x1b[2 q"  # steady block, every other mode
    CURSOR_SHAPE_DEFAULT = b"\x1b[0 q"  # terminal's own shape, restored on exit
    LINE_END = b"\r\n"  # output post-processing is off in raw mode

    # Screen layout
    FILLER_LINE = b"~"
    GUTTER_SEPARATOR = b"  "
    DEFAULT_LINE_NUMBER_WIDTH = 4
    COMMAND_PROMPT = b":"

    # Input
    DEFAULT_READ_TIMEOUT = 0.1  # Seconds a key read waits before re-checking the screen

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Application identity (config/log directories)
    APP_NAME = "modaltype"
    LOG_FILE_NAME = "modaltype.log"
    SETTINGS_FILE_NAME = "settings.json"

    # Messages
    USAGE_MESSAGE = "Usage: modaltype [FILE]"
    SAVED_MESSAGE = '"{}" {}L, {}B written'
    SAVE_ERROR_MESSAGE = "Error: Cannot save to {}"
    SAVE_PERMISSION_MESSAGE = "Error: Permission denied saving {}"
    SAVE_NO_SPACE_MESSAGE = "Error: No space left on device"
    OPEN_ERROR_MESSAGE = "Cannot open {}: {}"
