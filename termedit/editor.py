"""Main editor controller."""

import logging
from typing import Optional

from .commands import CommandRegistry
from .constants import EditorConstants
from .cursor import Cursor
from .keyboard import KeyDecoder, KeyEvent, KeyType
from .model import TextModel
from .search import Direction, SearchNavigator
from .storage import StorageError, default_filename, load_lines, save_lines
from .terminal import TerminalDriver, create_terminal
from .view import ScreenCompositor

logger = logging.getLogger(__name__)


class Editor:
    """Text editor application controller."""

    def __init__(self, terminal: Optional[TerminalDriver] = None):
        """Initialize the editor components."""
        self.terminal = terminal or create_terminal()
        self.decoder = KeyDecoder(self.terminal.read_byte)
        measure = self.terminal.measure_codepoint_width
        self.cursor = Cursor(1, 1, measure)
        self.model = TextModel(self.cursor, [""])
        self.search = SearchNavigator(self.model)
        self.compositor = ScreenCompositor(measure)
        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.running = False
        # File handling
        self.filename: Optional[str] = None
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None or 'search'
        self.prompt_input = ""
        self.quit_times = EditorConstants.QUIT_TIMES
        self._search_origin: Optional[tuple[int, ...]] = None
        self.update_size()

    @property
    def modified(self) -> bool:
        return self.model.content_changed

    def update_size(self):
        """Re-read the window size and recompute the scroll window for it."""
        rows, columns = self.terminal.window_size()
        text_rows = rows - EditorConstants.STATUS_ROWS
        logger.debug("Window size %dx%d", rows, columns)
        self.cursor.resync(self.model.buffer, text_rows, columns)

    def load_file(self, filename: Optional[str] = None):
        """Load a file into the editor.

        Without a filename the document gets a timestamped name that is
        used on save. A file that does not exist yet starts empty.
        """
        if filename is None:
            self.filename = default_filename()
            return
        self.filename = filename
        try:
            lines = load_lines(filename)
        except FileNotFoundError:
            self.model.set_lines([""])
            self.status_message = EditorConstants.STATUS_NEW_FILE
            return
        except StorageError as e:
            self.status_message = f"Error: {e}"
            return
        self.model.set_lines(lines)

    def save_file(self) -> bool:
        """Save the document to its file.

        Returns:
            True if save succeeded, False otherwise
        """
        if self.filename is None:
            self.filename = default_filename()
        try:
            save_lines(self.filename, self.model.buffer)
        except StorageError as e:
            self.status_message = f"Error: {e}"
            return False
        self.model.content_changed = False
        self.status_message = EditorConstants.STATUS_SAVED
        return True

    def request_quit(self):
        """Quit, unless there are unsaved changes that have not been confirmed."""
        if self.model.content_changed and self.quit_times > 0:
            self.status_message = EditorConstants.STATUS_UNSAVED.format(self.quit_times)
            self.quit_times -= 1
            return
        self.running = False

    def run(self):
        """Run the main editor loop."""
        self.running = True
        with self.terminal.raw_mode():
            self.update_size()
            while self.running:
                self._draw()
                key_event = self.decoder.read_key()
                if self.terminal.consume_resize():
                    self.update_size()
                if key_event.is_none:
                    if self.terminal.at_eof:
                        logger.warning("Input closed, leaving the editor")
                        self.running = False
                    continue
                self._handle_key_event(key_event)

    def _draw(self):
        """Draw the current editor state to terminal."""
        if self.prompt_mode == 'search':
            message = EditorConstants.SEARCH_PROMPT.format(self.prompt_input)
            frame = self.compositor.compose(self.model.buffer, self.cursor, message,
                                            cursor_on_status=True)
        else:
            frame = self.compositor.compose(self.model.buffer, self.cursor, self.status_message)
        self.terminal.write_frame(self.compositor.serialize(frame, self.terminal.term))

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event."""
        # Clear status message on any keypress (except in prompt mode)
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self.prompt_mode == 'search':
            self._handle_search_prompt(key_event)
            return

        # Handle ESC key by itself
        if key_event.key_type == KeyType.SPECIAL and key_event.value == 'escape':
            return

        if (key_event.key_type, key_event.value) != (KeyType.CTRL, 'q'):
            self.quit_times = EditorConstants.QUIT_TIMES

        self.command_registry.execute(self, key_event)

    # Search prompt

    def start_search(self):
        self.prompt_mode = 'search'
        self.prompt_input = ""
        self._search_origin = self.cursor.save_position()

    def _end_search(self):
        self.prompt_mode = None
        self._search_origin = None

    def _update_search(self):
        if self.prompt_input:
            if self.search.find_first(self.prompt_input) is not None:
                return
        # Nothing to show: back to where the search started
        self.search.match_found = False
        if self._search_origin is not None:
            self.cursor.restore_position(self._search_origin)

    def _handle_search_prompt(self, key_event: KeyEvent):
        key = (key_event.key_type, key_event.value)
        if key == (KeyType.SPECIAL, 'escape'):
            if self._search_origin is not None:
                self.cursor.restore_position(self._search_origin)
            self._end_search()
        elif key == (KeyType.SPECIAL, 'enter'):
            if self.prompt_input and not self.search.match_found:
                self.status_message = EditorConstants.STATUS_NOT_FOUND.format(self.prompt_input)
            self._end_search()
        elif key == (KeyType.SPECIAL, 'backspace'):
            self.prompt_input = self.prompt_input[:-1]
            self._update_search()
        elif key in ((KeyType.SPECIAL, 'down'), (KeyType.SPECIAL, 'right')):
            self.search.find_next(Direction.FORWARD)
        elif key in ((KeyType.SPECIAL, 'up'), (KeyType.SPECIAL, 'left')):
            self.search.find_next(Direction.BACKWARD)
        elif key_event.key_type == KeyType.REGULAR:
            self.prompt_input += key_event.value
            self._update_search()
