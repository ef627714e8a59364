"""Exceptions shared across the editor."""


class EditorFatalError(Exception):
    """An unrecoverable failure: the editor restores the terminal and exits 1."""
