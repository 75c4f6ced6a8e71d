"""termedit CLI entry point.

Allows running via `python -m termedit` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Sequence

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

USAGE = "Usage: termedit [filename]"


def configure_logging(level: int = logging.WARNING) -> Optional[str]:
    """Send log records to a file; the terminal belongs to the editor.

    Returns the log file path, or None when the log directory is unusable.
    """
    root = logging.getLogger()
    root.setLevel(level)
    log_dir = platformdirs.user_log_dir(EditorConstants.APP_NAME)
    try:
        os.makedirs(log_dir, exist_ok=True)
        path = os.path.join(log_dir, f"{EditorConstants.APP_NAME}.log")
        handler: logging.Handler = logging.FileHandler(path, encoding='utf-8')
    except OSError as e:
        root.addHandler(logging.NullHandler())
        logger.warning(f"Could not create log directory {log_dir}: {e}")
        return None
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    return path


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        return 2

    configure_logging()

    # Lazy imports keep the usage path free of terminal setup
    from .editor import Editor
    from .errors import TerminalSetupError

    try:
        editor = Editor()
        editor.load_file(args[0] if args else None)
        editor.run()
    except TerminalSetupError as e:
        logger.error(f"Terminal setup failed: {e}")
        print(f"termedit: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
