"""Exception hierarchy for termedit."""


class TermEditError(Exception):
    """Base class for all termedit errors."""


class TerminalSetupError(TermEditError):
    """The terminal cannot be put into (or queried in) the mode the editor needs.

    Fatal at startup: the editor cannot run without a terminal.
    """


class StorageError(TermEditError):
    """Loading or saving a document failed."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
