"""Reading and writing documents as lists of lines."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from typing import Iterable, Optional

from .constants import EditorConstants
from .errors import StorageError

logger = logging.getLogger(__name__)

__all__ = ["StorageError", "default_filename", "expand_path", "load_lines", "save_lines"]


def default_filename(now: Optional[datetime] = None) -> str:
    """Timestamped name for a document started without a filename."""
    now = now or datetime.now()
    return now.strftime(EditorConstants.NEW_FILE_FORMAT)


def expand_path(filename: str) -> str:
    return os.path.expanduser(filename)


def load_lines(filename: str) -> list[str]:
    """Read a UTF-8 text file as a list of lines without terminators.

    A trailing newline does not start an extra empty line. Raises
    ``FileNotFoundError`` when the file does not exist (a new document),
    and ``StorageError`` for any other failure.
    """
    path = expand_path(filename)
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        raise StorageError(f"Cannot read {filename}: {e}", path) from e
    if not content:
        return []
    content = content.replace('\r\n', '\n')
    if content.endswith('\n'):
        content = content[:-1]
    # Only newlines end lines; form feeds and other separators stay in the text
    return content.split('\n')


def save_lines(filename: str, lines: Iterable[str]) -> str:
    """Write lines to ``filename`` atomically and return the expanded path.

    The text goes to a temporary file in the same directory, which then
    replaces the target. Each line is written with a trailing newline.
    """
    path = expand_path(filename)
    content = ''.join(line + '\n' for line in lines)
    dir_name = os.path.dirname(path) or '.'
    suffix = os.path.splitext(path)[1]
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                         dir=dir_name, suffix=suffix,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, path)
    except OSError as e:
        logger.warning("Could not save %s: %s", path, e)
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_filename)
        if isinstance(e, PermissionError):
            raise StorageError(f"Permission denied saving {filename}", path) from e
        raise StorageError(f"Cannot save {filename}: {e}", path) from e
    return path
