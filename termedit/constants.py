"""Constants and configuration for the termedit editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    APP_NAME = "termedit"

    # Paging
    PAGE_SCROLL_OFFSET = 2  # Page-down stops this many lines above the page end

    # Keyboard timing
    ESCAPE_SEQUENCE_TIMEOUT = 0.01  # Wait for the byte after ESC (seconds)

    # Screen layout
    STATUS_ROWS = 1  # Rows reserved below the text area
    FILLER_GLYPH = "~"  # Rows past the end of the buffer
    OVERFLOW_GLYPH = "@"  # Rows of a line that does not fit on the page
    CONTROL_GLYPH = "?"  # Displayed in place of control codepoints

    # File operations
    NEW_FILE_FORMAT = "%Y%m%d-%H%M%S.txt"  # Name used when no file is given

    # Quit confirmation
    QUIT_TIMES = 1  # Extra Ctrl-Q presses needed to discard unsaved changes

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    STATUS_SAVED = "Saved file successfully!"
    STATUS_NEW_FILE = "New file"
    STATUS_UNSAVED = "Warning: unsaved changes! Press Ctrl-Q {} more time(s) to quit."
    STATUS_NOT_FOUND = "Not found: {}"
    SEARCH_PROMPT = "Search: {}"
