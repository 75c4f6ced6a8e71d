#!/usr/bin/env python3
"""termedit - A small raw-mode terminal text editor.

Usage:
    python main.py [filename]

Controls:
    Arrow keys, Home/End, PageUp/PageDown: Navigate
    Ctrl-S: Save file
    Ctrl-Q: Quit (press again to discard unsaved changes)
    Ctrl-F: Find (arrows step through matches, Enter accepts, ESC cancels)
    Type to insert text
    Backspace/Delete: Delete character
    Enter: Split line
"""

import sys

from termedit.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
